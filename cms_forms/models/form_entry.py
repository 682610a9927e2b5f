# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Form entry model.

Stores the values a visitor submitted for a form. Values live in a single
JSON column keyed by the form's field names, so a form can gain or lose
fields without a schema change.
"""

from typing import Any, Dict, Iterable, List, Mapping

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import reconstructor, relationship
from sqlalchemy.sql import func

from cms_forms.db.base import Base


class UnpermittedParameters(ValueError):
    """Raised when values are assigned for keys the form does not declare."""

    def __init__(self, keys: Iterable[str]):
        self.keys = sorted(keys)
        super().__init__(f"Unpermitted parameters: {', '.join(self.keys)}")


class FormEntry(Base):
    __tablename__ = "form_entries"

    id = Column(Integer, primary_key=True, index=True)
    form_id = Column(Integer, ForeignKey("forms.id"), nullable=False, index=True)
    data_columns = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=func.now(), index=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # No backref, so an unsaved entry never joins a collection of the form
    form = relationship("Form")

    __table_args__ = (
        {"sqlite_autoincrement": True, "mysql_charset": "utf8mb4"},
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("data_columns", {})
        super().__init__(**kwargs)
        self.errors: Dict[str, List[str]] = {}

    @reconstructor
    def _init_on_load(self):
        self.errors = {}

    @classmethod
    def for_form(cls, form) -> "FormEntry":
        """Build an unsaved entry for `form`, prefilled with field defaults."""
        defaults = {
            field.name: field.default_value
            for field in form.fields
            if field.default_value is not None
        }
        return cls(form=form, data_columns=defaults)

    @property
    def permitted_params(self) -> List[str]:
        return self.form.field_names

    def assign_attributes(self, values: Mapping[str, Any]) -> None:
        """
        Merge submitted values into the entry.

        Raises:
            UnpermittedParameters: if any key is not one of the form's fields
        """
        unknown = set(values) - set(self.permitted_params)
        if unknown:
            raise UnpermittedParameters(unknown)
        # Reassign so SQLAlchemy sees the JSON column change
        self.data_columns = {**(self.data_columns or {}), **values}

    def value_for(self, name: str) -> Any:
        return (self.data_columns or {}).get(name)

    def validate(self) -> bool:
        """Check every field, normalizing values in place. Fills `errors`."""
        self.errors = {}
        cleaned = dict(self.data_columns or {})
        for field in self.form.fields:
            try:
                cleaned[field.name] = field.clean(cleaned.get(field.name))
            except ValueError as e:
                self.errors.setdefault(field.name, []).append(f"{field.label} {e}")
        if not self.errors:
            self.data_columns = cleaned
        return not self.errors
