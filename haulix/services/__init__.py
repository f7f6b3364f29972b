"""
Domain services for dispatch and billing.

This module contains:
- Financials: Revenue, cost and profit derivation
- Scheduler: Assignment board time slots
- Action required: Billing handoff and partial completion views
- Analytics: Profit dashboard aggregates
- Commands: User-initiated writes with notifications
"""

from .action_required import action_required, daily_summary, is_partially_pending, is_pending_termination
from .commands import DispatchCommands, Notification
from .financials import FinancialSummary, calculate_cost, calculate_profit, calculate_revenue, summarize
from .scheduler import AssignmentSlot, assignment_slots

__all__ = [
    "AssignmentSlot",
    "DispatchCommands",
    "FinancialSummary",
    "Notification",
    "action_required",
    "assignment_slots",
    "calculate_cost",
    "calculate_profit",
    "calculate_revenue",
    "daily_summary",
    "is_partially_pending",
    "is_pending_termination",
    "summarize",
]
