"""
Dispatch text generated from load facts.
"""

from haulix.data.models.load import Leg, Load


def _handling_line(size: str) -> str:
    if "Reefer" in size:
        return "- Handling: ACTIVE REEFER. Driver must verify temperature settings and fuel levels prior to departure."
    if "HC" in size or "45ft" in size:
        return "- Handling: HIGH CUBE / OVERSIZED. Driver must verify bridge and route clearances."
    return "- Handling: Standard dry freight transport rules apply."


def generate_dispatch_notes(load: Load) -> str:
    """
    Build handling instructions from the route and equipment.

    The handling line depends on size/type: reefers, high-cube or 45ft
    boxes, or standard dry freight.
    """
    origin = load.origin or "[Origin Not Set]"
    destination = load.destination or "[Destination Not Set]"
    carrier = load.shipping_line or "[Carrier Not Set]"
    size = load.size or "Container"
    weight = f" at {load.weight}" if load.weight else ""

    lines = [
        "=== DISPATCH & HANDLING INSTRUCTIONS ===",
        "",
        "ROUTE SUMMARY:",
        f"- From: {origin}",
        f"- To: {destination}",
        f"- Carrier: {carrier}",
        "",
        "EQUIPMENT DETAILS:",
        f"- Size/Type: {size}{weight}",
        _handling_line(size),
        "",
        "SAFETY & COMPLIANCE:",
        "- Weather/Traffic: Please monitor conditions along the route.",
        "- Documentation: ALL stops require a signed POD with clear arrival/departure times.",
    ]
    return "\n".join(lines) + "\n"


def dispatch_assignment_text(load: Load, leg: Leg) -> str:
    """Plain-text assignment handed to a driver for one leg."""
    return "\n".join(
        [
            "DISPATCH ASSIGNMENT",
            "---------------------------",
            f"Container: {load.container_no}",
            f"Line: {load.shipping_line}",
            f"Size/Weight: {load.size} / {load.weight or 'N/A'}",
            f"PO #: {load.po_number or 'N/A'}",
            f"Pickup #: {load.pickup_no or 'N/A'}",
            f"Ref #: {load.customer_ref_no or 'N/A'}",
            f"Appointment: {load.appointment_date} at {load.appointment_time}",
            "",
            "ROUTING:",
            f"From: {leg.origin}",
            f"To: {leg.destination}",
            "",
            "DRIVER INFO:",
            f"Driver: {leg.driver_name or 'TBD'}",
            f"Truck: {leg.truck_no or 'TBD'}",
            "---------------------------",
        ]
    )
