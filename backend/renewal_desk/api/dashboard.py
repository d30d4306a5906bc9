"""Read-only dashboard API: health, headline counts and the policy list."""
import logging
from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from renewal_desk.core.config import settings
from renewal_desk.core.database import get_db
from renewal_desk.schemas.customer import PolicyOut, ReminderLogOut
from renewal_desk.services.store import PolicyStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/health")
def health():
    return {"status": "ok", "env": settings.ENVIRONMENT}


@router.get("/stats")
def get_stats(db: Session = Depends(get_db)):
    """Headline counts plus the ten most recent reminder sends."""
    store = PolicyStore(db)
    today = date.today()

    recent_logs = []
    for log, policy, customer in store.recent_reminder_logs(limit=10):
        out = ReminderLogOut.model_validate(log)
        out.policy_number = policy.policy_number
        out.customer_name = customer.name
        recent_logs.append(out.model_dump())

    return {
        "totalPolicies": store.count_policies(),
        "expiringSoon": store.count_expiring_within(today, days=30),
        "expiredCount": store.count_expired(today),
        "recentLogs": recent_logs,
    }


@router.get("/policies")
def list_policies(db: Session = Depends(get_db)):
    """Every policy with its customer's name and phone, soonest expiry first."""
    policies = []
    for policy, customer in PolicyStore(db).list_policies():
        out = PolicyOut.model_validate(policy)
        out.customer_name = customer.name
        out.phone = customer.phone
        policies.append(out.model_dump())
    return policies
