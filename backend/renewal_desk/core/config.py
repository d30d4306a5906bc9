from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Policy Renewal Desk"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Database
    DATABASE_URL: str = "sqlite:///./insurance.db"

    # File Upload
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    IMPORT_CHUNK_SIZE: int = 500

    # WhatsApp Cloud API (mock mode when token or phone number id is missing)
    WHATSAPP_TOKEN: Optional[str] = None
    WHATSAPP_PHONE_NUMBER_ID: Optional[str] = None
    WHATSAPP_API_URL: str = "https://graph.facebook.com/v17.0"
    WHATSAPP_TEMPLATE_LANGUAGE: str = "en_US"
    WHATSAPP_TIMEOUT: int = 15

    # Renewal reminders
    REMINDER_TEMPLATE_NAME: str = "policy_expiry_reminder"
    REMINDER_OFFSETS: List[int] = [30, 15, 7]

    # Broadcasts in test mode go only to this number
    ADMIN_PHONE: str = "+919876543210"

    # Prepended to bare 10-digit phone numbers
    DEFAULT_COUNTRY_CODE: str = "91"

    # Built dashboard (served with SPA fallback when present)
    STATIC_DIR: str = "dist"
    FRONTEND_URL: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
