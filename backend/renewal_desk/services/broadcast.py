"""Broadcast campaigns: one freeform WhatsApp text per recipient.

Test mode sends only to ADMIN_PHONE and records nothing. Production mode
sends to every customer and writes a single campaigns row once the loop
ends. Its status is always "completed"; per-recipient failures are only
visible in the returned results.
"""
import logging
from typing import List, Optional

from pydantic import BaseModel

from renewal_desk.core.config import settings
from renewal_desk.services.store import PolicyStore
from renewal_desk.services.whatsapp import WhatsAppClient

logger = logging.getLogger(__name__)

NAME_PLACEHOLDER = "{{1}}"
TEST_RECIPIENT_NAME = "Admin (Test)"
CAMPAIGN_STATUS_COMPLETED = "completed"


class Recipient(BaseModel):
    name: str
    phone: str


class RecipientOutcome(BaseModel):
    phone: str
    status: str


class BroadcastResult(BaseModel):
    count: int
    results: List[RecipientOutcome]


def personalize(template: str, name: str) -> str:
    """Replace the first {{1}} with the recipient's name. Later occurrences are left alone."""
    return template.replace(NAME_PLACEHOLDER, name, 1)


class BroadcastService:

    def __init__(self, store: PolicyStore, client: WhatsAppClient, admin_phone: Optional[str] = None):
        self.store = store
        self.client = client
        self.admin_phone = admin_phone or settings.ADMIN_PHONE

    def recipients(self, is_test: bool) -> List[Recipient]:
        if is_test:
            return [Recipient(name=TEST_RECIPIENT_NAME, phone=self.admin_phone)]
        return [Recipient(name=c.name, phone=c.phone) for c in self.store.list_customers()]

    def broadcast(self, campaign_name: str, message_template: str, is_test: bool) -> BroadcastResult:
        """Test sends reach only the admin and leave no Campaign row."""
        recipients = self.recipients(is_test)
        results = []

        for recipient in recipients:
            outcome = self.client.send_text(recipient.phone, personalize(message_template, recipient.name))
            results.append(RecipientOutcome(phone=recipient.phone, status=outcome.status))

        if not is_test:
            self.store.add_campaign(
                name=campaign_name,
                message=message_template,
                total_recipients=len(recipients),
                status=CAMPAIGN_STATUS_COMPLETED,
            )

        logger.info(
            f"Broadcast '{campaign_name}' ({'test' if is_test else 'production'}): "
            f"{len(results)} recipients"
        )
        return BroadcastResult(count=len(results), results=results)
