from pydantic import BaseModel, Field


class BroadcastRequest(BaseModel):
    campaign_name: str = Field(..., alias="campaignName")
    message_template: str = Field(..., alias="messageTemplate", min_length=1)
    is_test: bool = Field(True, alias="isTest")

    class Config:
        populate_by_name = True


class ManualSendRequest(BaseModel):
    phone: str = Field(..., min_length=1)
    # Sent by the dashboard form; the message body is used verbatim
    name: str = ""
    message: str = Field(..., min_length=1)
