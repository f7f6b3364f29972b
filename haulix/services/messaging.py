"""
Customer-facing text: invoice email drafts and carrier tracking links.
"""

from typing import Optional
from urllib.parse import quote_plus

from haulix.core.config import EmailConfig
from haulix.core.errors import LoadValidationError
from haulix.data.models.load import Load
from haulix.services.financials import calculate_revenue
from haulix.services.ports import OutboundEmail

CARRIER_TRACKING_URLS = (
    (("cn", "canadian national"), "https://www.cn.ca/en/customer-centre/your-shipment/shipment-tracking/"),
    (("cp", "cpkc"), "https://www.cpkcr.com/en/customer-resources/tracking"),
    (("one",), "https://ecomm.one-line.com/one-ecom/manage-shipment/cargo-tracking"),
    (("msc",), "https://www.msc.com/en/track-a-shipment"),
    (("maersk",), "https://www.maersk.com/tracking/"),
)


def carrier_tracking_url(shipping_line: str) -> str:
    """Carrier tracking portal for a shipping line, or a web search."""
    carrier = (shipping_line or "").lower()
    for needles, url in CARRIER_TRACKING_URLS:
        if any(needle in carrier for needle in needles):
            return url
    return f"https://www.google.com/search?q={quote_plus(shipping_line or '')}+container+tracking"


def draft_invoice_email(load: Load, company_name: str) -> str:
    """Default invoice email body; the amount due is the load revenue."""
    total = calculate_revenue(load)
    return (
        f"Dear {load.customer_name or 'Customer'},\n"
        "\n"
        "Please find attached the invoice for the following shipment:\n"
        "\n"
        "Invoice Details:\n"
        f"- Container: {load.container_no}\n"
        f"- PO Number: {load.po_number or 'N/A'}\n"
        f"- Reference: {load.customer_ref_no or 'N/A'}\n"
        f"- Amount Due: ${total:.2f}\n"
        "\n"
        "Please confirm receipt of this invoice.\n"
        "\n"
        "Thank you for your business.\n"
        "\n"
        "Best regards,\n"
        f"{company_name or 'Haulix'} Dispatch Team"
    )


def build_invoice_email(
    load: Load,
    body: str,
    attachment_urls: list[str],
    email_config: Optional[EmailConfig] = None,
) -> OutboundEmail:
    """
    Assemble the invoice email for a load.

    Raises:
        LoadValidationError: If the load has no customer email
    """
    if not load.customer_email.strip():
        raise LoadValidationError("No customer email found")
    email_config = email_config or EmailConfig()
    return OutboundEmail(
        to=load.customer_email.strip(),
        subject=f"{email_config.subject_prefix}: {load.container_no}",
        text=body,
        html=body.replace("\n", "<br>"),
        sender_name=email_config.sender_name,
        attachment_urls=attachment_urls,
    )

