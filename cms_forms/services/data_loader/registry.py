# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Fixture model registry.

Maps model names to model classes for the data loader. Names are looked up
in the CMS namespace first and in the global namespace second, so a CMS
model wins over a generic model of the same name.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type

from cms_forms.db.base import Base

logger = logging.getLogger(__name__)

CMS_NAMESPACE = "cms"


class UnresolvableModelError(LookupError):
    """Raised when a model name is registered in no namespace."""

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(f"Unknown model: '{model_name}'")


def normalize_model_name(name: str) -> str:
    """FormEntry, form_entry and formentry all name the same model."""
    return name.replace("_", "").lower()


@dataclass(frozen=True)
class ModelRegistration:
    name: str
    model: Type
    bucket: str
    namespace: Optional[str] = None


class ModelRegistry:
    """Registry of fixture models keyed by (namespace, normalized name)."""

    def __init__(self, namespace: str = CMS_NAMESPACE):
        self.namespace = namespace
        self._models: Dict[Tuple[Optional[str], str], ModelRegistration] = {}

    def register(
        self,
        model: Type,
        *,
        name: Optional[str] = None,
        namespace: Optional[str] = None,
        bucket: Optional[str] = None,
    ) -> ModelRegistration:
        """
        Register a model class.

        Args:
            model: Class to instantiate for this name
            name: Lookup name, defaults to the class name
            namespace: CMS namespace or None for the global namespace
            bucket: Key fixtures of this model are stored under, defaults
                to the model's table name

        Returns:
            The stored registration
        """
        name = name or model.__name__
        bucket = bucket or getattr(model, "__tablename__", None)
        if not bucket:
            raise ValueError(f"Model '{name}' needs an explicit bucket name")

        key = (namespace, normalize_model_name(name))
        if key in self._models:
            logger.warning(f"Overwriting existing fixture model '{name}'")
        registration = ModelRegistration(
            name=name, model=model, bucket=bucket, namespace=namespace
        )
        self._models[key] = registration
        logger.debug(f"Registered fixture model '{name}' in bucket '{bucket}'")
        return registration

    def resolve(self, model_name: str) -> ModelRegistration:
        """
        Find the registration for a model name.

        Raises:
            UnresolvableModelError: if neither namespace knows the name
        """
        key = normalize_model_name(model_name)
        for namespace in (self.namespace, None):
            registration = self._models.get((namespace, key))
            if registration is not None:
                return registration
        raise UnresolvableModelError(model_name)

    def is_registered(self, model_name: str) -> bool:
        try:
            self.resolve(model_name)
        except UnresolvableModelError:
            return False
        return True

    @property
    def buckets(self) -> List[str]:
        return sorted({r.bucket for r in self._models.values()})

    @staticmethod
    def is_persistable(model: Type) -> bool:
        return (
            isinstance(model, type)
            and issubclass(model, Base)
            and hasattr(model, "__table__")
        )


def register_cms_models(registry: ModelRegistry) -> ModelRegistry:
    """Register the application's models. Users live in the global namespace."""
    from cms_forms.models import EmailMessage, Form, FormEntry, FormField, User

    for model in (Form, FormField, FormEntry, EmailMessage):
        registry.register(model, namespace=CMS_NAMESPACE)
    registry.register(User)
    return registry


default_registry = register_cms_models(ModelRegistry())


def fixture_model(
    name: Optional[str] = None,
    namespace: Optional[str] = None,
    bucket: Optional[str] = None,
    registry: Optional[ModelRegistry] = None,
):
    """
    Decorator to register a model with a fixture registry.

    Usage:
        @fixture_model(namespace="cms")
        class Portlet(Base):
            ...
    """

    def decorator(cls: Type) -> Type:
        (registry or default_registry).register(
            cls, name=name, namespace=namespace, bucket=bucket
        )
        return cls

    return decorator
