# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
HTML rendering of public CMS form pages.

Page templates extend the configured layout, so every form page is
wrapped by the same site chrome.
"""

from typing import Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from cms_forms.core.config import PACKAGE_DIR, settings
from cms_forms.models.form import Form
from cms_forms.models.form_entry import FormEntry

FORM_PAGE_TEMPLATE = "cms/forms/page.html"
FORM_ERROR_TEMPLATE = "cms/forms/error.html"

templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))


def render_form_page(
    request: Request,
    form: Form,
    entry: Optional[FormEntry] = None,
    *,
    template: str = FORM_PAGE_TEMPLATE,
    submitted: bool = False,
    status_code: int = 200,
):
    """Render a form as a page inside the form layout."""
    entry = entry if entry is not None else FormEntry.for_form(form)
    return templates.TemplateResponse(
        request,
        template,
        {
            "layout": settings.FORM_LAYOUT,
            "page_title": form.name,
            "form": form,
            "entry": entry,
            "errors": entry.errors,
            "submitted": submitted,
        },
        status_code=status_code,
    )
