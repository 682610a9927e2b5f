# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Email message service.

Queues notification emails as EmailMessage rows. Delivery is done by an
external mailer.
"""

import logging
from typing import Iterable, Optional, Union

from sqlalchemy.orm import Session

from cms_forms.core.config import settings
from cms_forms.models.email_message import EmailMessage
from cms_forms.models.form import Form
from cms_forms.models.form_entry import FormEntry
from cms_forms.services.base import BaseService

logger = logging.getLogger(__name__)

FORM_ENTRY_SUBJECT = "[CMS Form] A new entry has been created"


def absolute_cms_url(path: str) -> str:
    """Turn a site path into a fully qualified URL on the public site."""
    if path.startswith(("http://", "https://")):
        return path
    return f"{settings.CMS_SITE_URL.rstrip('/')}/{path.lstrip('/')}"


class EmailMessageService(BaseService[EmailMessage]):
    """Service for queued email messages"""

    def create_message(
        self,
        db: Session,
        *,
        recipients: Union[str, Iterable[str]],
        subject: str,
        body: str,
        sender: Optional[str] = None,
    ) -> EmailMessage:
        if not isinstance(recipients, str):
            recipients = ", ".join(recipients)
        if not recipients.strip():
            raise ValueError("Email message needs at least one recipient")
        message = self.create(
            db,
            obj_in={
                "sender": sender or settings.MAIL_SENDER,
                "recipients": recipients,
                "subject": subject,
                "body": body,
            },
        )
        logger.info(f"Queued email message {message.id} to {recipients}")
        return message

    def notify_form_entry(
        self, db: Session, form: Form, entry: FormEntry, entry_path: str
    ) -> Optional[EmailMessage]:
        """
        Queue the "new entry" notification for a form, if it has recipients.

        Args:
            db: Database session
            form: Form that was submitted
            entry: The saved entry
            entry_path: Site path of the entry's admin view

        Returns:
            The queued message, or None when the form has no recipients
        """
        if not form.sends_notification:
            return None
        body = (
            f"A visitor has filled out the {form.name} form. "
            f"The entry can be found here:\n{absolute_cms_url(entry_path)}"
        )
        return self.create_message(
            db,
            recipients=", ".join(form.notification_recipients),
            subject=FORM_ENTRY_SUBJECT,
            body=body,
        )


email_message_service = EmailMessageService(EmailMessage)
