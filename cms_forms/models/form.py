# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
CMS form models.

A Form describes a submittable field schema and what happens after a
visitor submits it: inline confirmation text or a redirect, and an
optional notification email.
"""

import enum
import re
from typing import Any, List

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from cms_forms.db.base import Base

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
TRUTHY_VALUES = {"1", "true", "on", "yes"}


class FormFieldType(str, enum.Enum):
    """Types of form fields."""

    TEXT_FIELD = "text_field"
    TEXT_AREA = "text_area"
    EMAIL = "email"
    SELECT = "select"
    CHECKBOX = "checkbox"


class Form(Base):
    """
    Form model.

    notification_email may hold several comma separated recipients.
    """

    __tablename__ = "forms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    show_text = Column(
        Boolean,
        nullable=False,
        default=True,
        comment="Show confirmation_text inline instead of redirecting",
    )
    confirmation_text = Column(Text, nullable=True)
    confirmation_redirect = Column(String(1024), nullable=True)
    notification_email = Column(String(1024), nullable=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    fields = relationship(
        "FormField",
        back_populates="form",
        order_by="FormField.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        {"sqlite_autoincrement": True, "mysql_charset": "utf8mb4"},
    )

    @property
    def field_names(self) -> List[str]:
        return [field.name for field in self.fields]

    @property
    def notification_recipients(self) -> List[str]:
        if not self.notification_email:
            return []
        return [
            address.strip()
            for address in self.notification_email.split(",")
            if address.strip()
        ]

    @property
    def sends_notification(self) -> bool:
        return bool(self.notification_recipients)


class FormField(Base):
    """A single input of a form. `name` is the key values are stored under."""

    __tablename__ = "form_fields"

    id = Column(Integer, primary_key=True, index=True)
    form_id = Column(Integer, ForeignKey("forms.id"), nullable=False, index=True)
    label = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    field_type = Column(String(50), nullable=False, default=FormFieldType.TEXT_FIELD.value)
    required = Column(Boolean, nullable=False, default=False)
    options = Column(JSON, nullable=True, comment="Choices for select fields")
    default_value = Column(String(1024), nullable=True)
    instructions = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    form = relationship("Form", back_populates="fields")

    __table_args__ = (
        UniqueConstraint("form_id", "name", name="uq_form_fields_form_id_name"),
        {"sqlite_autoincrement": True, "mysql_charset": "utf8mb4"},
    )

    def clean(self, value: Any) -> Any:
        """
        Normalize a submitted value and check it against this field's rules.

        Raises:
            ValueError: with a human readable message if the value is invalid
        """
        if self.field_type == FormFieldType.CHECKBOX.value:
            checked = value is True or str(value).strip().lower() in TRUTHY_VALUES
            if self.required and not checked:
                raise ValueError("must be accepted")
            return checked

        if value is None or (isinstance(value, str) and not value.strip()):
            if self.required:
                raise ValueError("can't be blank")
            return None

        if isinstance(value, str):
            value = value.strip()

        if self.field_type == FormFieldType.EMAIL.value:
            if not EMAIL_PATTERN.match(str(value)):
                raise ValueError("is not a valid email address")
        elif self.field_type == FormFieldType.SELECT.value:
            # JSON options may hold numbers while submitted values are strings
            matches = [o for o in (self.options or []) if str(o) == str(value)]
            if not matches:
                raise ValueError("is not included in the list")
            return matches[0]
        return value
