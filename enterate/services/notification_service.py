# Simulated e-mail delivery
# Nothing leaves the process: messages are logged and kept in the sent log

import asyncio
import logging
import time
import uuid
from typing import List

from ..schemas.notification import EmailTemplate, SentNotification
from ..utils.constants import AppConstants
from .local_store import LocalStore

logger = logging.getLogger(__name__)

APP_URL = "https://enterate.com"


def _wrap_html(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"></head>
  <body style="font-family: Arial, sans-serif; color: #333;">
    <h1>{title}</h1>
    {body}
    <p style="color: #666; font-size: 14px;">
      Este correo fue enviado automáticamente por el sistema Entérate
    </p>
  </body>
</html>"""


def create_admin_approval_email(user_name: str, user_email: str) -> EmailTemplate:
    body = (
        "<p>Tu solicitud para convertirte en <strong>administrador</strong> de "
        "Entérate ha sido <strong>aprobada</strong>.</p>"
        "<p>En tu próximo inicio de sesión podrás crear, editar y eliminar eventos.</p>"
        f'<p><a href="{APP_URL}">Acceder a Entérate</a></p>'
    )
    return EmailTemplate(
        to=user_email,
        subject="🎉 ¡Tu solicitud de administrador ha sido aprobada! - Entérate",
        html=_wrap_html(f"¡Felicitaciones {user_name}!", body),
    )


def create_admin_rejection_email(user_name: str, user_email: str) -> EmailTemplate:
    body = (
        "<p>Revisamos tu solicitud para convertirte en administrador de Entérate y "
        "por el momento no ha sido aprobada.</p>"
        "<p>Puedes seguir participando en la comunidad y volver a solicitarlo más "
        "adelante.</p>"
    )
    return EmailTemplate(
        to=user_email,
        subject="📋 Actualización sobre tu solicitud de administrador - Entérate",
        html=_wrap_html(f"Hola {user_name}", body),
    )


class NotificationService:
    """Sends simulated e-mails and keeps a log of what was sent"""

    def __init__(
        self,
        local_store: LocalStore,
        delay_seconds: float = AppConstants.DEFAULT_EMAIL_DELAY_SECONDS,
    ):
        self.local_store = local_store
        self.delay_seconds = delay_seconds

    async def send_email(self, email: EmailTemplate) -> bool:
        """Simulate delivery latency, then record the message as sent"""
        try:
            if self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)

            record = SentNotification(
                id=f"email_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}",
                **email.model_dump(),
            )
            result = self.local_store.append_sent_email(record)
            if not result.ok:
                logger.error(f"❌ Could not record e-mail to {email.to}: {result.reason}")
                return False

            logger.info(f"📧 EMAIL SENT to {email.to}: {email.subject}")
            return True
        except Exception as e:
            logger.error(f"❌ Error sending e-mail: {e}")
            return False

    async def send_admin_decision(self, user_name: str, user_email: str, approved: bool) -> bool:
        if approved:
            email = create_admin_approval_email(user_name, user_email)
        else:
            email = create_admin_rejection_email(user_name, user_email)
        return await self.send_email(email)

    def sent_emails(self) -> List[SentNotification]:
        """Sent log, newest first"""
        return sorted(
            self.local_store.get_sent_emails(), key=lambda e: e.sent_at, reverse=True
        )
