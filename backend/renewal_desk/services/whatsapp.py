"""WhatsApp Cloud API client.

Sends pre-approved template messages (renewal reminders) and freeform text
(broadcasts, manual sends). Without WHATSAPP_TOKEN / WHATSAPP_PHONE_NUMBER_ID
the client runs in mock mode: nothing leaves the process and every send
reports "mock_sent".
"""
import logging
import requests
from typing import Any, List, Optional
from pydantic import BaseModel
from renewal_desk.core.config import settings

logger = logging.getLogger(__name__)

STATUS_SENT = "sent"
STATUS_MOCK_SENT = "mock_sent"
STATUS_FAILED = "failed"


class DispatchOutcome(BaseModel):
    status: str
    data: Optional[Any] = None
    error: Optional[str] = None


class WhatsAppClient:
    """Posts message payloads to the Graph API messages endpoint."""

    def __init__(self, token: Optional[str] = None, phone_number_id: Optional[str] = None,
                 api_url: Optional[str] = None, timeout: Optional[int] = None):
        self.token = token if token is not None else settings.WHATSAPP_TOKEN
        self.phone_number_id = (
            phone_number_id if phone_number_id is not None else settings.WHATSAPP_PHONE_NUMBER_ID
        )
        self.api_url = (api_url or settings.WHATSAPP_API_URL).rstrip("/")
        self.timeout = timeout or settings.WHATSAPP_TIMEOUT
        self.language = settings.WHATSAPP_TEMPLATE_LANGUAGE

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.phone_number_id)

    def send_template(self, phone: str, name: str, params: List[str]) -> DispatchOutcome:
        """Send a pre-approved template with ordered body parameters."""
        if not self.is_configured:
            logger.info(f"[MOCK WHATSAPP] To: {phone}, Msg: Template: {name}, Params: {', '.join(params)}")
            return DispatchOutcome(status=STATUS_MOCK_SENT)

        payload = {
            "messaging_product": "whatsapp",
            "to": phone,
            "type": "template",
            "template": {
                "name": name,
                "language": {"code": self.language},
                "components": [
                    {
                        "type": "body",
                        "parameters": [{"type": "text", "text": p} for p in params],
                    }
                ],
            },
        }
        return self._post(phone, payload)

    def send_text(self, phone: str, body: str) -> DispatchOutcome:
        """Send a freeform text message."""
        if not self.is_configured:
            logger.info(f"[MOCK WHATSAPP] To: {phone}, Msg: Text: {body}")
            return DispatchOutcome(status=STATUS_MOCK_SENT)

        payload = {
            "messaging_product": "whatsapp",
            "to": phone,
            "type": "text",
            "text": {"body": body},
        }
        return self._post(phone, payload)

    def _post(self, phone: str, payload: dict) -> DispatchOutcome:
        try:
            resp = requests.post(
                f"{self.api_url}/{self.phone_number_id}/messages",
                json=payload,
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            detail = e.response.text[:500] if e.response is not None else str(e)
            logger.error(f"WhatsApp API error sending to {phone}: {detail}")
            return DispatchOutcome(status=STATUS_FAILED, error=str(e))

        try:
            data = resp.json()
        except ValueError:
            data = resp.text[:500]
        return DispatchOutcome(status=STATUS_SENT, data=data)


# Singleton instance
_client: Optional[WhatsAppClient] = None


def get_whatsapp_client() -> WhatsAppClient:
    global _client
    if _client is None:
        _client = WhatsAppClient()
    return _client
