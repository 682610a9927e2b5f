# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Models package
"""
from cms_forms.models.email_message import EmailMessage
from cms_forms.models.form import Form, FormField, FormFieldType
from cms_forms.models.form_entry import FormEntry, UnpermittedParameters
from cms_forms.models.user import User

__all__ = [
    "User",
    "Form",
    "FormField",
    "FormFieldType",
    "FormEntry",
    "UnpermittedParameters",
    "EmailMessage",
]
