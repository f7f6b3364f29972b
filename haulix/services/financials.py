"""
Revenue, cost and profit derivation for a load.

All functions are pure and total: a missing, blank or non-numeric input
counts as zero, and so does an amount of 10**31 or more. Sums run exactly
in MONEY_CONTEXT and are rounded to cents; profit is computed from the
rounded revenue and cost so that profit == revenue - cost holds exactly.
"""

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext
from typing import Any, Iterable

from pydantic import BaseModel

from haulix.core.config import BillingVariant
from haulix.data.models.load import Load

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Accepted amounts keep at most 31 integer and 30 fractional digits, so sums
# of them stay well inside 100 significant digits.
MAX_EXPONENT = 30
MIN_QUANTUM = Decimal("1e-30")
MONEY_CONTEXT = Context(prec=100, rounding=ROUND_HALF_UP)


class FinancialSummary(BaseModel):
    """Rounded financials for display and export."""

    revenue: Decimal
    cost: Decimal
    profit: Decimal

    def formatted(self) -> dict[str, str]:
        """Two-decimal strings, as handed to document templates."""
        return {
            "revenue": f"{self.revenue:.2f}",
            "cost": f"{self.cost:.2f}",
            "profit": f"{self.profit:.2f}",
        }


def to_amount(value: Any) -> Decimal:
    """Numeric value of a money field, or 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if not amount.is_finite() or amount.adjusted() > MAX_EXPONENT:
        return ZERO
    if amount.as_tuple().exponent < MIN_QUANTUM.as_tuple().exponent:
        amount = amount.quantize(MIN_QUANTUM, context=MONEY_CONTEXT)
    return amount


def round_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, context=MONEY_CONTEXT)


def _total(amounts: Iterable[Decimal]) -> Decimal:
    with localcontext(MONEY_CONTEXT):
        return sum(amounts, ZERO)


def _difference(revenue: Decimal, cost: Decimal) -> Decimal:
    return round_cents(MONEY_CONTEXT.subtract(revenue, cost))


def _rate_subtotal(load: Load) -> Decimal:
    return _total(to_amount(value) for value in (load.base_price, load.waiting_time, load.fuel_surcharge))


def calculate_revenue(load: Load) -> Decimal:
    """Base price + waiting time + fuel surcharge + prepull + extra charges."""
    extras = [to_amount(charge.amount) for charge in load.extra_charges]
    return round_cents(_total([_rate_subtotal(load), to_amount(load.prepull), *extras]))


def calculate_cost(load: Load, variant: BillingVariant = BillingVariant.COST_TRACKING) -> Decimal:
    """
    Cost of running the load.

    Cost tracking: per-leg driver pay, fuel and detention, plus the
    load-level driver cost, fuel cost and broker rate.
    Pricing only: the customer-rate subtotal.
    """
    if variant == BillingVariant.PRICING_ONLY:
        return round_cents(_rate_subtotal(load))

    leg_cost = _total(
        to_amount(value)
        for leg in load.legs
        for value in (leg.driver_pay, leg.fuel_cost, leg.detention_pay)
    )
    manual_cost = _total(to_amount(value) for value in (load.driver_cost, load.fuel_cost, load.broker_rate))
    return round_cents(_total([leg_cost, manual_cost]))


def calculate_profit(load: Load, variant: BillingVariant = BillingVariant.COST_TRACKING) -> Decimal:
    return _difference(calculate_revenue(load), calculate_cost(load, variant))


def summarize(load: Load, variant: BillingVariant = BillingVariant.COST_TRACKING) -> FinancialSummary:
    """Revenue, cost and profit of a load in one pass."""
    revenue = calculate_revenue(load)
    cost = calculate_cost(load, variant)
    return FinancialSummary(revenue=revenue, cost=cost, profit=_difference(revenue, cost))
