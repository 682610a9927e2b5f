# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Named fixture loader.

Creates records by model name and remembers them by a symbolic fixture
name, so setup scripts and tests can refer back to them:

    loader = DataLoader(db)
    loader.create_form("contact", {"name": "Contact us"})
    loader.create("FormField", "email", {"form": loader.forms("contact"), ...})
    loader.forms("contact")  # live record, re-read from the database
"""

import logging
import re
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

import yaml
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from cms_forms.core.config import settings
from cms_forms.services.data_loader.registry import (
    ModelRegistry,
    UnresolvableModelError,
    default_registry,
)

logger = logging.getLogger(__name__)

CREATE_OPERATION = re.compile(r"^create_(?P<model>.+)$")
REFERENCE_KEY = "ref"

# Attributes of the loader itself, never routed as fixture operations
_OWN_ATTRIBUTES = frozenset({"db", "registry", "silent_mode", "data"})


class UnknownOperationError(AttributeError):
    """Raised for operations that are neither create_<model> nor <bucket>."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"'DataLoader' object has no operation '{operation}'")


class DataLoader:
    """
    Creates and recalls records by fixture name.

    Fixtures are kept in `data[bucket][fixture_name]`, where the bucket is
    the registered storage name of the model (e.g. "form_entries").
    Creating a fixture under an existing name replaces it.
    """

    def __init__(
        self,
        db: Session,
        registry: Optional[ModelRegistry] = None,
        silent_mode: Optional[bool] = None,
    ):
        self.db = db
        self.registry = registry or default_registry
        self.silent_mode = (
            settings.DATA_LOADER_SILENT if silent_mode is None else silent_mode
        )
        self.data: Dict[str, Dict[str, Any]] = {}

    def create(
        self,
        model_name: str,
        fixture_name: str,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Create, persist and remember a record.

        Raises:
            UnresolvableModelError: if model_name is not registered
            TypeError: if the registered class is not a database model
            SQLAlchemyError: if the record cannot be saved
        """
        registration = self.registry.resolve(model_name)
        if not self.registry.is_persistable(registration.model):
            raise TypeError(f"'{registration.name}' is not a persistable model")

        if not self.silent_mode:
            logger.info(f"-- create_{registration.name}(:{fixture_name})")

        bucket = self.data.setdefault(registration.bucket, {})
        record = registration.model(**dict(attributes or {}))
        self.db.add(record)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(record)
        bucket[fixture_name] = record
        return record

    def get(self, bucket: str, fixture_name: str) -> Any:
        """
        Re-read a fixture from the database.

        Returns:
            The live record, or None if no fixture has that name

        Raises:
            UnknownOperationError: if no fixture was ever created in bucket
        """
        if bucket not in self.data:
            raise UnknownOperationError(bucket)
        record = self.data[bucket].get(fixture_name)
        if record is None:
            return None
        identity = inspect(record).identity
        return self.db.get(type(record), identity, populate_existing=True)

    def dispatch(self, operation: str, *args, **kwargs) -> Any:
        """Run a create_<model> or <bucket> operation by name."""
        return self._route(operation)(*args, **kwargs)

    def _route(self, operation: str) -> Callable[..., Any]:
        match = CREATE_OPERATION.match(operation)
        if match:
            model_name = match.group("model")
            if self._creatable(model_name):
                return partial(self._create_named, model_name)
        elif operation in self.__dict__.get("data", {}):
            return partial(self.get, operation)
        raise UnknownOperationError(operation)

    def _creatable(self, model_name: str) -> bool:
        try:
            registration = self.registry.resolve(model_name)
        except UnresolvableModelError:
            return False
        return self.registry.is_persistable(registration.model)

    def _create_named(
        self,
        model_name: str,
        fixture_name: str,
        attributes: Optional[Mapping[str, Any]] = None,
        **extra: Any,
    ) -> Any:
        return self.create(model_name, fixture_name, {**(attributes or {}), **extra})

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_") or name in _OWN_ATTRIBUTES:
            raise AttributeError(name)
        return self._route(name)

    def load_documents(self, documents: Iterable[Mapping[str, Any]]) -> List[Any]:
        """
        Create fixtures from documents of the form
        {"model": ..., "name": ..., "attributes": {...}}, in order.

        Attribute values written as {"ref": "<bucket>.<name>"} are replaced
        with the fixture created earlier under that name.
        """
        records = []
        for document in documents:
            try:
                model_name = document["model"]
                fixture_name = document["name"]
            except KeyError as e:
                raise ValueError(f"Fixture document is missing {e}") from e
            attributes = {
                key: self._resolve_references(value)
                for key, value in (document.get("attributes") or {}).items()
            }
            records.append(self.create(model_name, fixture_name, attributes))
        return records

    def load_yaml(self, path: Union[str, Path]) -> List[Any]:
        """Load fixtures from a YAML file, one or more documents per file."""
        with open(path, "r", encoding="utf-8") as f:
            documents = [doc for doc in yaml.safe_load_all(f) if doc]
        flattened: List[Mapping[str, Any]] = []
        for doc in documents:
            if isinstance(doc, list):
                flattened.extend(doc)
            else:
                flattened.append(doc)
        logger.info(f"Loading {len(flattened)} fixtures from {path}")
        return self.load_documents(flattened)

    def _resolve_references(self, value: Any) -> Any:
        if isinstance(value, list):
            return [self._resolve_references(item) for item in value]
        if isinstance(value, dict) and set(value) == {REFERENCE_KEY}:
            bucket, _, fixture_name = str(value[REFERENCE_KEY]).rpartition(".")
            record = self.data.get(bucket, {}).get(fixture_name)
            if record is None:
                raise ValueError(f"Unknown fixture reference: {value[REFERENCE_KEY]}")
            return record
        return value
