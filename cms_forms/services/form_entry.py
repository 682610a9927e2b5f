# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Form entry service.

Loads forms and entries, binds submitted values to entries and persists
them once they validate.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from cms_forms.core.config import settings
from cms_forms.core.exceptions import NotFoundException, ValidationException
from cms_forms.models.form import Form
from cms_forms.models.form_entry import FormEntry, UnpermittedParameters
from cms_forms.schemas.form_entry import ColumnDefinition, ContentTypeInfo
from cms_forms.services.base import BaseService

logger = logging.getLogger(__name__)

ORDERABLE_COLUMNS = ("id", "created_at", "updated_at")
DEFAULT_ORDER = "created_at desc"


class FormEntryContentType:
    """
    Describes entries of one form the way other content types are described,
    so they can be shown by the same generic listing view.
    """

    name = "FormEntry"

    def __init__(self, form: Form):
        self.form = form

    @property
    def display_name(self) -> str:
        return "Entry"

    def columns_for_index(self) -> List[ColumnDefinition]:
        return [
            ColumnDefinition(label=field.label, method=field.name)
            for field in self.form.fields
        ]

    def cells_for(self, entry: FormEntry) -> Dict[str, Any]:
        return {
            column.method: entry.value_for(column.method)
            for column in self.columns_for_index()
        }

    def to_schema(self) -> ContentTypeInfo:
        return ContentTypeInfo(
            name=self.name,
            display_name=self.display_name,
            columns=self.columns_for_index(),
        )


def parse_order(order: Optional[str]):
    """
    Turn an order parameter such as "created_at desc" into an ORDER BY clause.

    Raises:
        ValidationException: if the column is not orderable
    """
    parts = (order or DEFAULT_ORDER).split()
    column_name = parts[0] if parts else ""
    direction = parts[1].lower() if len(parts) > 1 else "asc"
    if (
        column_name not in ORDERABLE_COLUMNS
        or direction not in ("asc", "desc")
        or len(parts) > 2
    ):
        raise ValidationException(f"Invalid order: {order}")
    column = getattr(FormEntry, column_name)
    return column.desc() if direction == "desc" else column.asc()


class FormEntryService(BaseService[FormEntry]):
    """Service for form entries and the forms they belong to."""

    @property
    def per_page(self) -> int:
        return settings.ENTRIES_PER_PAGE

    def find_form(self, db: Session, form_id: int) -> Form:
        form = db.query(Form).filter(Form.id == form_id).first()
        if form is None:
            raise NotFoundException(f"Form {form_id} not found")
        return form

    def build_entry(self, form: Form, values: Mapping[str, Any]) -> FormEntry:
        """
        Build an unsaved entry for `form` and assign the submitted values.

        Raises:
            ValidationException: if values contain keys the form does not declare
        """
        entry = FormEntry.for_form(form)
        self.assign(entry, values)
        return entry

    def assign(self, entry: FormEntry, values: Mapping[str, Any]) -> None:
        try:
            entry.assign_attributes(values)
        except UnpermittedParameters as e:
            logger.warning(f"Rejected entry values for form {entry.form.id}: {e}")
            raise ValidationException(str(e))

    def save_entry(self, db: Session, entry: FormEntry) -> bool:
        """
        Validate and persist an entry.

        Returns:
            False if validation failed (errors are left on entry.errors),
            True once the entry has been committed
        """
        if not entry.validate():
            logger.info(
                f"Form entry for form {entry.form.id} failed validation: {entry.errors}"
            )
            return False
        self.save(db, entry)
        logger.info(f"Saved form entry {entry.id} for form {entry.form.id}")
        return True

    def update_entry(
        self, db: Session, entry: FormEntry, values: Mapping[str, Any]
    ) -> bool:
        self.assign(entry, values)
        return self.save_entry(db, entry)

    def discard_changes(self, db: Session, entry: FormEntry) -> None:
        """Reload a persisted entry after a rejected update."""
        db.expire(entry)

    def list_entries(
        self,
        db: Session,
        form: Form,
        *,
        page: int = 1,
        order: Optional[str] = None,
        per_page: Optional[int] = None,
    ) -> Tuple[List[FormEntry], int]:
        """
        Get one page of the entries of a form.

        Returns:
            Tuple of (entries on the page, total number of entries)
        """
        per_page = per_page or self.per_page
        order_clause = parse_order(order)
        query = db.query(FormEntry).filter(FormEntry.form_id == form.id)
        total = query.count()
        entries = (
            query.order_by(order_clause, FormEntry.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return entries, total

    def content_type_for(self, form: Form) -> FormEntryContentType:
        return FormEntryContentType(form)


form_entry_service = FormEntryService(FormEntry)
