# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Public CMS form endpoints.

Visitors load a form page and submit it without authentication.
"""

import logging
import re
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session
from starlette.datastructures import FormData

from cms_forms.api.dependencies import get_db
from cms_forms.core.exceptions import ValidationException
from cms_forms.core.templating import FORM_ERROR_TEMPLATE, render_form_page
from cms_forms.services.email_message import email_message_service
from cms_forms.services.form_entry import form_entry_service

router = APIRouter()
logger = logging.getLogger(__name__)

ENTRY_PREFIX = "form_entry["
ENTRY_PARAM = re.compile(r"^form_entry\[(?P<name>[^\[\]]+)\]$")


def entry_params(form_data: FormData) -> Dict[str, Any]:
    """
    Collect the form_entry[<field>] values of an HTML form post.

    Nested keys such as form_entry[tags][] are kept under their full
    suffix ("tags[]"), which no field declares, so they are rejected
    along with other unknown keys.

    Raises:
        ValidationException: if the post carries no form_entry values
    """
    values = {}
    for key, value in form_data.multi_items():
        if not key.startswith(ENTRY_PREFIX):
            continue
        match = ENTRY_PARAM.match(key)
        if match:
            values[match.group("name")] = value
        else:
            values[key[len(ENTRY_PREFIX):].replace("]", "", 1)] = value
    if not values:
        raise ValidationException("param is missing or the value is empty: form_entry")
    return values


@router.get("/forms/{form_id}", response_class=HTMLResponse, name="show_form_page")
def show_form_page(request: Request, form_id: int, db: Session = Depends(get_db)):
    """Render an empty form inside the form layout."""
    form = form_entry_service.find_form(db, form_id)
    return render_form_page(request, form)


@router.post("/forms/{form_id}/submit", name="submit_form")
async def submit_form(request: Request, form_id: int, db: Session = Depends(get_db)):
    """
    Handle public submission of a form.

    On success either shows the form's confirmation text or redirects to
    its confirmation location, then queues the notification email if the
    form has recipients. On validation failure the form is shown again
    with its errors.

    Raises:
        HTTPException: 404 if the form does not exist
        HTTPException: 400 if values are posted for undeclared fields
    """
    form = form_entry_service.find_form(db, form_id)
    entry = form_entry_service.build_entry(form, entry_params(await request.form()))

    if not form_entry_service.save_entry(db, entry):
        return render_form_page(
            request,
            form,
            entry,
            template=FORM_ERROR_TEMPLATE,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    if form.show_text:
        response = render_form_page(request, form, entry, submitted=True)
    else:
        response = RedirectResponse(
            url=form.confirmation_redirect or "/",
            status_code=status.HTTP_303_SEE_OTHER,
        )

    entry_path = request.app.url_path_for("show_form_entry", entry_id=entry.id)
    email_message_service.notify_form_entry(db, form, entry, entry_path)
    return response
