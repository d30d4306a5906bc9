"""Outbound WhatsApp API: broadcasts, one-off sends and the reminder sweep trigger."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from renewal_desk.core.database import get_db
from renewal_desk.schemas.messaging import BroadcastRequest, ManualSendRequest
from renewal_desk.services.broadcast import BroadcastService
from renewal_desk.services.reminders import ReminderScheduler
from renewal_desk.services.store import PolicyStore
from renewal_desk.services.whatsapp import WhatsAppClient, get_whatsapp_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["messaging"])


@router.post("/broadcast")
def broadcast(
    data: BroadcastRequest,
    db: Session = Depends(get_db),
    client: WhatsAppClient = Depends(get_whatsapp_client),
):
    """Send a personalized message to customers.

    isTest defaults to true when omitted, which sends only to the admin phone
    and records no campaign. Pass isTest=false to message every customer.
    """
    service = BroadcastService(PolicyStore(db), client)
    result = service.broadcast(data.campaign_name, data.message_template, data.is_test)
    return {"message": "Broadcast initiated", "count": result.count}


@router.post("/send-manual")
def send_manual(
    data: ManualSendRequest,
    client: WhatsAppClient = Depends(get_whatsapp_client),
):
    """Send one freeform message to an arbitrary number.

    The message goes out exactly as given; the request's name is not inserted.
    """
    outcome = client.send_text(data.phone, data.message)
    return {"status": outcome.status}


@router.post("/trigger-reminders")
def trigger_reminders(
    db: Session = Depends(get_db),
    client: WhatsAppClient = Depends(get_whatsapp_client),
):
    """Run the renewal reminder sweep for today."""
    results = ReminderScheduler(PolicyStore(db), client).run()
    return {"triggered": len(results), "details": [r.model_dump() for r in results]}
