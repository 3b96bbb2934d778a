from pydantic import BaseModel, Field
from datetime import datetime


class EmailTemplate(BaseModel):
    to: str
    subject: str
    html: str


class SentNotification(EmailTemplate):
    """Record of a simulated e-mail kept in the sent-notification log"""

    id: str
    sent_at: datetime = Field(default_factory=datetime.utcnow)
    status: str = "sent"
