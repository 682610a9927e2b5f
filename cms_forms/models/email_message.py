# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Email message model.

Messages are queued here and picked up by an external mailer, which sets
delivered_at once sent.
"""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from cms_forms.db.base import Base


class EmailMessage(Base):
    __tablename__ = "email_messages"

    id = Column(Integer, primary_key=True, index=True)
    sender = Column(String(255), nullable=False)
    recipients = Column(Text, nullable=False)
    subject = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    delivered_at = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        {"sqlite_autoincrement": True, "mysql_charset": "utf8mb4"},
    )

    @property
    def delivered(self) -> bool:
        return self.delivered_at is not None
