# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter

from cms_forms.api.endpoints import auth, form_entries, forms, health

# Authenticated JSON API, mounted under settings.API_PREFIX
api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(form_entries.router, prefix="/cms", tags=["form-entries"])

# Public site pages
public_router = APIRouter()
public_router.include_router(forms.router, prefix="/cms", tags=["forms"])
