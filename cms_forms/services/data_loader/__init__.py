# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Named fixture loader module.

- ModelRegistry maps model names to classes and storage buckets
- DataLoader creates records by model name and recalls them by fixture name
"""

from cms_forms.services.data_loader.loader import DataLoader, UnknownOperationError
from cms_forms.services.data_loader.registry import (
    CMS_NAMESPACE,
    ModelRegistry,
    UnresolvableModelError,
    default_registry,
    fixture_model,
    register_cms_models,
)

__all__ = [
    "CMS_NAMESPACE",
    "DataLoader",
    "ModelRegistry",
    "UnknownOperationError",
    "UnresolvableModelError",
    "default_registry",
    "fixture_model",
    "register_cms_models",
]
