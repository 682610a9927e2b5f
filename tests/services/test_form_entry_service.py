# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for form entries and the form entry service."""

import pytest
from fastapi import HTTPException

from cms_forms.core.exceptions import NotFoundException, ValidationException
from cms_forms.models import FormEntry, UnpermittedParameters
from cms_forms.services.form_entry import (
    FormEntryContentType,
    form_entry_service,
    parse_order,
)


def _entry(contact_form, **values):
    entry = FormEntry.for_form(contact_form)
    entry.assign_attributes(values)
    return entry


class TestFormEntryModel:
    """Tests for FormEntry value binding and validation."""

    def test_for_form_prefills_defaults(self, contact_form):
        entry = FormEntry.for_form(contact_form)

        assert entry.id is None
        assert entry.form is contact_form
        assert entry.data_columns == {"topic": "General"}
        assert entry.errors == {}

    def test_permitted_params_are_field_names(self, contact_form):
        entry = FormEntry.for_form(contact_form)

        assert entry.permitted_params == ["name", "email", "topic"]

    def test_unknown_keys_are_rejected(self, contact_form):
        entry = FormEntry.for_form(contact_form)

        with pytest.raises(UnpermittedParameters) as exc_info:
            entry.assign_attributes({"name": "Ada", "is_admin": "1"})

        assert exc_info.value.keys == ["is_admin"]
        # Nothing was assigned
        assert entry.value_for("name") is None

    def test_valid_entry(self, contact_form):
        entry = _entry(contact_form, name=" Ada ", email="ada@example.com")

        assert entry.validate() is True
        assert entry.value_for("name") == "Ada"
        assert entry.value_for("topic") == "General"

    def test_required_field_blank(self, contact_form):
        entry = _entry(contact_form, name="  ", email="ada@example.com")

        assert entry.validate() is False
        assert entry.errors == {"name": ["Name can't be blank"]}

    def test_invalid_email(self, contact_form):
        entry = _entry(contact_form, name="Ada", email="not-an-email")

        assert entry.validate() is False
        assert entry.errors["email"] == ["Email is not a valid email address"]

    def test_select_value_must_be_an_option(self, contact_form):
        entry = _entry(contact_form, name="Ada", email="ada@example.com", topic="Other")

        assert entry.validate() is False
        assert "topic" in entry.errors

    def test_select_matches_numeric_options(self, loader, contact_form):
        loader.create_form_field(
            "contact_rating",
            {
                "form": contact_form,
                "label": "Rating",
                "name": "rating",
                "field_type": "select",
                "options": [1, 2, 3],
                "position": 4,
            },
        )
        form = loader.forms("contact")

        entry = _entry(form, name="Ada", email="ada@example.com", rating="2")
        assert entry.validate() is True
        assert entry.value_for("rating") == 2

        wrong = _entry(form, name="Ada", email="ada@example.com", rating="4")
        assert wrong.validate() is False
        assert wrong.errors["rating"] == ["Rating is not included in the list"]

    def test_checkbox_values_are_booleans(self, loader, contact_form):
        loader.create_form_field(
            "contact_terms",
            {
                "form": contact_form,
                "label": "Terms",
                "name": "terms",
                "field_type": "checkbox",
                "required": True,
                "position": 4,
            },
        )
        form = loader.forms("contact")

        accepted = _entry(form, name="Ada", email="ada@example.com", terms="on")
        assert accepted.validate() is True
        assert accepted.value_for("terms") is True

        declined = _entry(form, name="Ada", email="ada@example.com", terms="0")
        assert declined.validate() is False
        assert declined.errors["terms"] == ["Terms must be accepted"]


class TestFormEntryService:
    """Tests for FormEntryService."""

    def test_find_form_missing(self, test_db):
        with pytest.raises(NotFoundException):
            form_entry_service.find_form(test_db, 999)

    def test_build_entry_rejects_unknown_keys(self, contact_form):
        with pytest.raises(ValidationException) as exc_info:
            form_entry_service.build_entry(contact_form, {"bogus": "x"})

        assert isinstance(exc_info.value, HTTPException)
        assert exc_info.value.status_code == 400
        assert "bogus" in exc_info.value.detail

    def test_save_entry_persists_valid_entry(self, test_db, contact_form):
        entry = form_entry_service.build_entry(
            contact_form, {"name": "Ada", "email": "ada@example.com"}
        )

        assert form_entry_service.save_entry(test_db, entry) is True
        assert entry.id is not None
        assert form_entry_service.get(test_db, entry.id).value_for("name") == "Ada"

    def test_save_entry_does_not_persist_invalid_entry(self, test_db, contact_form):
        entry = form_entry_service.build_entry(contact_form, {"name": "Ada"})

        assert form_entry_service.save_entry(test_db, entry) is False
        assert entry.id is None
        assert "email" in entry.errors
        assert test_db.query(FormEntry).count() == 0

    def test_get_or_404(self, test_db):
        with pytest.raises(NotFoundException):
            form_entry_service.get_or_404(test_db, 42)


class TestListEntries:
    """Tests for paginated, ordered entry listing."""

    @pytest.fixture
    def entries(self, loader, contact_form):
        return [
            loader.create_form_entry(
                f"entry_{i}",
                {
                    "form": contact_form,
                    "data_columns": {"name": f"Visitor {i}", "email": f"v{i}@example.com"},
                },
            )
            for i in range(5)
        ]

    def test_default_order_is_newest_first(self, test_db, contact_form, entries):
        items, total = form_entry_service.list_entries(test_db, contact_form)

        assert total == 5
        assert [e.id for e in items] == sorted((e.id for e in entries), reverse=True)

    def test_pagination(self, test_db, contact_form, entries):
        items, total = form_entry_service.list_entries(
            test_db, contact_form, page=2, order="id", per_page=2
        )

        assert total == 5
        assert [e.id for e in items] == [entries[2].id, entries[3].id]

    def test_page_past_the_end_is_empty(self, test_db, contact_form, entries):
        items, total = form_entry_service.list_entries(
            test_db, contact_form, page=10, per_page=2
        )

        assert items == []
        assert total == 5

    @pytest.mark.parametrize(
        "order", ["name", "id sideways", "id desc extra", "created_at; drop table"]
    )
    def test_invalid_order_rejected(self, order):
        with pytest.raises(ValidationException):
            parse_order(order)

    def test_content_type_columns_follow_fields(self, contact_form, entries):
        content_type = FormEntryContentType(contact_form)
        schema = content_type.to_schema()

        assert schema.name == "FormEntry"
        assert schema.display_name == "Entry"
        assert [(c.label, c.method) for c in schema.columns] == [
            ("Name", "name"),
            ("Email", "email"),
            ("Topic", "topic"),
        ]
        assert content_type.cells_for(entries[0]) == {
            "name": "Visitor 0",
            "email": "v0@example.com",
            "topic": None,
        }
