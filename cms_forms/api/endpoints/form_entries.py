# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Form entry management endpoints.

Authenticated listing, creation, editing and display of the entries of a
form. Successful writes redirect to the entry.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from cms_forms.api.dependencies import get_db
from cms_forms.core import security
from cms_forms.models.form import Form
from cms_forms.models.form_entry import FormEntry
from cms_forms.models.user import User
from cms_forms.schemas.form_entry import (
    FormEntryDetail,
    FormEntryErrorResponse,
    FormEntryListResponse,
    FormEntryParams,
    FormEntryResponse,
    FormEntryRow,
    FormFieldInfo,
)
from cms_forms.services.form_entry import form_entry_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _fields(form: Form) -> List[FormFieldInfo]:
    return [FormFieldInfo.model_validate(field) for field in form.fields]


def _detail(entry: FormEntry) -> FormEntryDetail:
    return FormEntryDetail(
        entry=FormEntryResponse.from_entry(entry), fields=_fields(entry.form)
    )


def _validation_failed(entry: FormEntry) -> JSONResponse:
    body = FormEntryErrorResponse(
        errors=entry.errors,
        entry=FormEntryResponse.from_entry(entry),
        fields=_fields(entry.form),
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=body.model_dump(mode="json"),
    )


def _redirect_to_entry(request: Request, entry: FormEntry) -> RedirectResponse:
    return RedirectResponse(
        url=str(request.url_for("show_form_entry", entry_id=entry.id)),
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/forms/{form_id}/entries", response_model=FormEntryListResponse)
def list_form_entries(
    form_id: int,
    page: int = Query(1, ge=1, description="Page number"),
    order: Optional[str] = Query(
        None, description="Sort column, optionally followed by 'desc'"
    ),
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    """
    List the entries of a form, one page at a time.

    The content type describes one column per form field, so entries can be
    shown by the generic content listing.
    """
    form = form_entry_service.find_form(db, form_id)
    content_type = form_entry_service.content_type_for(form)
    entries, total = form_entry_service.list_entries(db, form, page=page, order=order)
    return FormEntryListResponse(
        content_type=content_type.to_schema(),
        items=[
            FormEntryRow(
                id=entry.id,
                cells=content_type.cells_for(entry),
                created_at=entry.created_at,
            )
            for entry in entries
        ],
        total=total,
        page=page,
        per_page=form_entry_service.per_page,
    )


@router.get("/forms/{form_id}/entries/new", response_model=FormEntryDetail)
def new_form_entry(
    form_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    """Unsaved entry with the form's default values."""
    form = form_entry_service.find_form(db, form_id)
    return _detail(FormEntry.for_form(form))


@router.post(
    "/forms/{form_id}/entries",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={422: {"model": FormEntryErrorResponse}},
)
def create_form_entry(
    request: Request,
    form_id: int,
    params: FormEntryParams,
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    """
    Create an entry for a form.

    Raises:
        HTTPException: 404 if the form does not exist
        HTTPException: 400 if values are given for undeclared fields
    """
    form = form_entry_service.find_form(db, form_id)
    entry = form_entry_service.build_entry(form, params.form_entry)
    if not form_entry_service.save_entry(db, entry):
        return _validation_failed(entry)
    logger.info(f"User {current_user.user_name} created form entry {entry.id}")
    return _redirect_to_entry(request, entry)


@router.get(
    "/form_entries/{entry_id}",
    response_model=FormEntryResponse,
    name="show_form_entry",
)
def show_form_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    entry = form_entry_service.get_or_404(db, entry_id)
    return FormEntryResponse.from_entry(entry)


@router.get("/form_entries/{entry_id}/edit", response_model=FormEntryDetail)
def edit_form_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    entry = form_entry_service.get_or_404(db, entry_id)
    return _detail(entry)


@router.put(
    "/form_entries/{entry_id}",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={422: {"model": FormEntryErrorResponse}},
)
def update_form_entry(
    request: Request,
    entry_id: int,
    params: FormEntryParams,
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    """
    Update the values of an entry.

    Raises:
        HTTPException: 404 if the entry does not exist
        HTTPException: 400 if values are given for undeclared fields
    """
    entry = form_entry_service.get_or_404(db, entry_id)
    if not form_entry_service.update_entry(db, entry, params.form_entry):
        response = _validation_failed(entry)
        form_entry_service.discard_changes(db, entry)
        return response
    logger.info(f"User {current_user.user_name} updated form entry {entry.id}")
    return _redirect_to_entry(request, entry)
