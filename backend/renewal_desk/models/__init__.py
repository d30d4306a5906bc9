from renewal_desk.models.customer import Customer, Policy
from renewal_desk.models.campaign import ReminderLog, Campaign

__all__ = [
    "Customer",
    "Policy",
    "ReminderLog",
    "Campaign",
]
