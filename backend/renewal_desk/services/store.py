"""Storage access for customers, policies, reminder logs and campaigns.

Every write commits on its own; there is no transaction spanning a whole
import or sweep, so a failure part-way leaves earlier rows in place.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from renewal_desk.models.customer import Customer, Policy
from renewal_desk.models.campaign import ReminderLog, Campaign

logger = logging.getLogger(__name__)

# Calendar day of the stored expiry; a time-of-day suffix is ignored and
# non-date text becomes NULL, which no comparison matches
_EXPIRY_DAY = func.date(Policy.expiry_date)


class PolicyStore:
    """Thin repository over the four tables. The caller owns the session lifecycle."""

    def __init__(self, db: Session):
        self.db = db

    # ── Customers ──

    def get_customer_by_phone(self, phone: str) -> Optional[Customer]:
        return self.db.query(Customer).filter(Customer.phone == phone).first()

    def get_or_create_customer(self, name: str, phone: str, email: Optional[str] = None) -> Customer:
        """Insert a customer unless the phone is already known; an existing row is reused untouched."""
        customer = self.get_customer_by_phone(phone)
        if customer:
            return customer

        customer = Customer(name=name, phone=phone, email=email)
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def list_customers(self) -> List[Customer]:
        return self.db.query(Customer).order_by(Customer.id).all()

    # ── Policies ──

    def upsert_policy(self, customer_id: int, policy_number: str, policy_type: str, expiry_date: str) -> Policy:
        """Insert or fully overwrite the policy with this number.

        An existing row keeps its id (so reminder logs still resolve) but every
        other column is replaced, including the owning customer.
        """
        policy = self.db.query(Policy).filter(Policy.policy_number == policy_number).first()
        if policy is None:
            policy = Policy(policy_number=policy_number)
            self.db.add(policy)
        elif policy.customer_id != customer_id:
            logger.warning(
                "Policy %s reassigned from customer %s to %s",
                policy_number, policy.customer_id, customer_id,
            )

        policy.customer_id = customer_id
        policy.policy_type = policy_type
        policy.expiry_date = expiry_date
        policy.status = "active"
        self.db.commit()
        self.db.refresh(policy)
        return policy

    def list_policies(self) -> List[Tuple[Policy, Customer]]:
        return (
            self.db.query(Policy, Customer)
            .join(Customer, Policy.customer_id == Customer.id)
            .order_by(Policy.expiry_date.asc(), Policy.id.asc())
            .all()
        )

    def policies_expiring_on(self, target: date) -> List[Tuple[Policy, Customer]]:
        """Policies whose expiry is exactly the target date."""
        return (
            self.db.query(Policy, Customer)
            .join(Customer, Policy.customer_id == Customer.id)
            .filter(_EXPIRY_DAY == target.isoformat())
            .order_by(Policy.id)
            .all()
        )

    # ── Logs ──

    def add_reminder_log(self, policy_id: int, status: str, days_remaining: int,
                         message_type: str = "reminder") -> ReminderLog:
        log = ReminderLog(
            policy_id=policy_id,
            status=status,
            days_remaining=days_remaining,
            message_type=message_type,
        )
        self.db.add(log)
        self.db.commit()
        return log

    def recent_reminder_logs(self, limit: int = 10) -> List[Tuple[ReminderLog, Policy, Customer]]:
        return (
            self.db.query(ReminderLog, Policy, Customer)
            .join(Policy, ReminderLog.policy_id == Policy.id)
            .join(Customer, Policy.customer_id == Customer.id)
            .order_by(ReminderLog.sent_at.desc(), ReminderLog.id.desc())
            .limit(limit)
            .all()
        )

    def add_campaign(self, name: str, message: str, total_recipients: int, status: str) -> Campaign:
        campaign = Campaign(
            name=name,
            message=message,
            total_recipients=total_recipients,
            status=status,
        )
        self.db.add(campaign)
        self.db.commit()
        return campaign

    # ── Dashboard counts ──

    def count_policies(self) -> int:
        return self.db.query(func.count(Policy.id)).scalar() or 0

    def count_expiring_within(self, today: date, days: int = 30) -> int:
        """Policies expiring between today and today+days, both inclusive."""
        return self.db.query(func.count(Policy.id)).filter(
            _EXPIRY_DAY >= today.isoformat(),
            _EXPIRY_DAY <= (today + timedelta(days=days)).isoformat(),
        ).scalar() or 0

    def count_expired(self, today: date) -> int:
        return self.db.query(func.count(Policy.id)).filter(
            _EXPIRY_DAY < today.isoformat(),
        ).scalar() or 0
