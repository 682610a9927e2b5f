# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Form entry API schemas.

Pydantic models for form entry request/response validation.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FormEntryParams(BaseModel):
    """Request body for creating or updating an entry."""

    form_entry: Dict[str, Any] = Field(
        ..., description="Field values keyed by form field name"
    )


class FormFieldInfo(BaseModel):
    """Schema of a single form field."""

    id: int
    label: str
    name: str
    field_type: str
    required: bool = False
    options: Optional[List[Any]] = None
    default_value: Optional[str] = None
    instructions: Optional[str] = None
    position: int = 0

    class Config:
        from_attributes = True


class FormEntryResponse(BaseModel):
    """A single form entry."""

    id: Optional[int] = Field(None, description="Entry ID, null if unsaved")
    form_id: int
    form_name: str
    values: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entry(cls, entry) -> "FormEntryResponse":
        return cls(
            id=entry.id,
            form_id=entry.form.id,
            form_name=entry.form.name,
            values=dict(entry.data_columns or {}),
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class FormEntryDetail(BaseModel):
    """Entry together with the field schema needed to edit it."""

    entry: FormEntryResponse
    fields: List[FormFieldInfo]


class FormEntryErrorResponse(BaseModel):
    """Returned when an entry fails validation."""

    detail: str = "Form entry validation failed"
    errors: Dict[str, List[str]]
    entry: FormEntryResponse
    fields: List[FormFieldInfo]


class ColumnDefinition(BaseModel):
    label: str
    method: str


class ContentTypeInfo(BaseModel):
    """Lets entries be listed by the generic content listing view."""

    name: str
    display_name: str
    columns: List[ColumnDefinition]


class FormEntryRow(BaseModel):
    id: int
    cells: Dict[str, Any]
    created_at: Optional[datetime] = None


class FormEntryListResponse(BaseModel):
    content_type: ContentTypeInfo
    items: List[FormEntryRow]
    total: int
    page: int
    per_page: int
