from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CustomerPolicyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    policy_number: str = Field(..., min_length=1)
    policy_type: str = "General"
    expiry_date: str = Field(..., min_length=1)


class PolicyOut(BaseModel):
    id: int
    customer_id: Optional[int] = None
    policy_number: str
    policy_type: str
    expiry_date: str
    status: Optional[str] = None
    customer_name: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class ReminderLogOut(BaseModel):
    id: int
    policy_id: Optional[int] = None
    sent_at: Optional[datetime] = None
    status: Optional[str] = None
    days_remaining: Optional[int] = None
    message_type: Optional[str] = None
    policy_number: Optional[str] = None
    customer_name: Optional[str] = None

    class Config:
        from_attributes = True
