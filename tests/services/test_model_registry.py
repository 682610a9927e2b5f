# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for the fixture model registry."""

import pytest

from cms_forms.models import EmailMessage, Form, FormEntry, FormField, User
from cms_forms.services.data_loader.registry import (
    CMS_NAMESPACE,
    ModelRegistry,
    UnresolvableModelError,
    default_registry,
    fixture_model,
    normalize_model_name,
)


class Widget:
    __tablename__ = "widgets"

    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)


class CmsWidget(Widget):
    pass


class TestModelRegistry:
    """Tests for ModelRegistry resolution."""

    def test_cms_namespace_wins_over_global(self):
        """A CMS model shadows a global model of the same name."""
        registry = ModelRegistry()
        registry.register(Widget)
        registry.register(CmsWidget, name="Widget", namespace=CMS_NAMESPACE)

        assert registry.resolve("Widget").model is CmsWidget

    def test_falls_back_to_global_namespace(self):
        registry = ModelRegistry()
        registry.register(Widget)

        registration = registry.resolve("Widget")
        assert registration.model is Widget
        assert registration.namespace is None

    def test_unknown_name_raises(self):
        registry = ModelRegistry()

        with pytest.raises(UnresolvableModelError) as exc_info:
            registry.resolve("Gadget")

        assert "Gadget" in str(exc_info.value)
        assert isinstance(exc_info.value, LookupError)
        assert registry.is_registered("Gadget") is False

    @pytest.mark.parametrize("name", ["FormEntry", "form_entry", "formentry"])
    def test_name_spellings_resolve_to_same_model(self, name):
        assert default_registry.resolve(name).model is FormEntry

    def test_normalize_model_name(self):
        assert normalize_model_name("Dynamic_Portlet") == "dynamicportlet"

    def test_bucket_defaults_to_table_name(self):
        assert default_registry.resolve("Form").bucket == "forms"
        assert default_registry.resolve("FormField").bucket == "form_fields"
        assert default_registry.resolve("FormEntry").bucket == "form_entries"
        assert default_registry.resolve("EmailMessage").bucket == "email_messages"

    def test_explicit_bucket(self):
        registry = ModelRegistry()
        registry.register(Widget, bucket="gizmos")

        assert registry.resolve("widget").bucket == "gizmos"
        assert registry.buckets == ["gizmos"]

    def test_bucket_required_without_table_name(self):
        class Plain:
            pass

        with pytest.raises(ValueError):
            ModelRegistry().register(Plain)

    def test_application_models_namespaces(self):
        assert default_registry.resolve("Form").namespace == CMS_NAMESPACE
        assert default_registry.resolve("EmailMessage").model is EmailMessage
        assert default_registry.resolve("FormField").model is FormField
        assert default_registry.resolve("User").namespace is None
        assert default_registry.resolve("user").model is User

    def test_is_persistable(self):
        assert ModelRegistry.is_persistable(Form) is True
        assert ModelRegistry.is_persistable(Widget) is False
        assert ModelRegistry.is_persistable("Form") is False


class TestFixtureModelDecorator:
    """Tests for the @fixture_model decorator."""

    def test_registers_class(self):
        registry = ModelRegistry()

        @fixture_model(namespace=CMS_NAMESPACE, registry=registry)
        class Portlet:
            __tablename__ = "portlets"

        registration = registry.resolve("portlet")
        assert registration.model is Portlet
        assert registration.bucket == "portlets"
        assert registration.namespace == CMS_NAMESPACE
