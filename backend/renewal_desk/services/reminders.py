"""Renewal reminder sweep.

For each lead-time offset (30, 15 and 7 days by default) the sweep looks up
policies expiring exactly on today + offset and sends each customer the
pre-approved expiry template, logging one reminder_logs row per send.

Sends happen one at a time. Nothing checks earlier logs, so running the sweep
twice on the same day sends and logs every matching reminder twice.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence

from pydantic import BaseModel

from renewal_desk.core.config import settings
from renewal_desk.services.store import PolicyStore
from renewal_desk.services.whatsapp import WhatsAppClient

logger = logging.getLogger(__name__)


class ReminderOutcome(BaseModel):
    policy: str
    days: int
    status: str


class ReminderScheduler:

    def __init__(self, store: PolicyStore, client: WhatsAppClient,
                 offsets: Optional[Sequence[int]] = None, template_name: Optional[str] = None):
        self.store = store
        self.client = client
        self.offsets = list(offsets) if offsets is not None else list(settings.REMINDER_OFFSETS)
        self.template_name = template_name or settings.REMINDER_TEMPLATE_NAME

    def run(self, today: Optional[date] = None) -> List[ReminderOutcome]:
        today = today or date.today()
        results = []

        for days in self.offsets:
            target = today + timedelta(days=days)
            matches = self.store.policies_expiring_on(target)
            logger.info(f"Reminder sweep: {len(matches)} policies expire on {target.isoformat()} ({days} days)")

            for policy, customer in matches:
                outcome = self.client.send_template(
                    customer.phone,
                    self.template_name,
                    [customer.name, policy.policy_type, policy.expiry_date],
                )
                self.store.add_reminder_log(policy.id, outcome.status, days)
                results.append(ReminderOutcome(policy=policy.policy_number, days=days, status=outcome.status))

        logger.info(f"Reminder sweep finished: {len(results)} reminders dispatched")
        return results
