"""Tests for the field configuration editor"""

import pytest

from form_builder.exceptions import DesignerInvariantError, ValidationFailure
from form_builder.handlers.field_config_editor import (
    LABEL_REQUIRED_MESSAGE,
    OPTIONS_REQUIRED_MESSAGE,
    FieldConfigEditor,
)
from form_builder.models.field_type import FieldType
from form_builder.services.designer_state import DesignerState
from form_builder.utils.id_generator import SequentialIdGenerator


@pytest.fixture
def designer():
    return DesignerState(id_generator=SequentialIdGenerator())


@pytest.fixture
def editor(designer):
    return FieldConfigEditor(designer)


class TestOpenAndCancel:
    def test_open_none_is_noop(self, editor):
        editor.open(None)
        assert editor.is_open is False
        assert editor.title == "Configure Field"

    def test_open_seeds_working_copy(self, designer, editor):
        field = designer.insert_field(FieldType.SELECT)

        editor.open(field)

        assert editor.is_open
        assert editor.title == "Configure Select"
        assert editor.label == "Select Option"
        assert editor.placeholder == ""
        assert editor.required is False
        assert editor.options == ["Option 1", "Option 2"]

    def test_working_copy_does_not_alias_field(self, designer, editor):
        field = designer.insert_field(FieldType.RADIO)
        editor.open(field)

        editor.update_option(0, "Changed")

        assert designer.get_field(field.id).options == ["Option 1", "Option 2"]

    def test_cancel_leaves_field_unchanged(self, designer, editor):
        field = designer.insert_field(FieldType.TEXT)
        editor.open(field)
        editor.set_label("Full Name")
        editor.set_required(True)

        editor.cancel()

        assert editor.is_open is False
        assert designer.get_field(field.id) == field

    def test_setters_need_an_open_editor(self, editor):
        with pytest.raises(DesignerInvariantError):
            editor.set_label("Name")


class TestOptions:
    def test_option_edits_match_reference_list(self, designer, editor):
        editor.open(designer.insert_field(FieldType.RADIO))
        reference = ["Option 1", "Option 2"]

        steps = [
            ("append", None, None),
            ("update", 2, "Maybe"),
            ("remove", 0, None),
            ("append", None, None),
            ("update", 0, "Yes"),
            ("remove", 2, None),
            ("update", 1, "No"),
        ]
        for action, index, text in steps:
            if action == "append":
                editor.append_option()
                reference.append("")
            elif action == "update":
                editor.update_option(index, text)
                reference[index] = text
            else:
                editor.remove_option(index)
                del reference[index]
            assert editor.options == reference

        assert editor.options == ["Yes", "No"]

    def test_bad_index_rejected(self, designer, editor):
        editor.open(designer.insert_field(FieldType.SELECT))
        with pytest.raises(DesignerInvariantError):
            editor.update_option(5, "Nope")
        with pytest.raises(DesignerInvariantError):
            editor.remove_option(-1)

    def test_option_ops_rejected_for_text(self, designer, editor):
        editor.open(designer.insert_field(FieldType.TEXT))
        assert editor.needs_options is False
        with pytest.raises(DesignerInvariantError):
            editor.append_option()

    def test_replace_options(self, designer, editor):
        editor.open(designer.insert_field(FieldType.SELECT))
        editor.replace_options(["Red", "Green", "Blue"])
        assert editor.options == ["Red", "Green", "Blue"]


class TestSave:
    def test_commit_changes_only_configurable_attributes(self, designer, editor):
        designer.insert_field(FieldType.TEXT)
        field = designer.insert_field(FieldType.TEXT)
        editor.open(field)
        editor.set_label("Email Address")
        editor.set_placeholder("you@example.com")
        editor.set_required(True)

        saved = editor.save()

        stored = designer.get_field(field.id)
        assert stored == saved
        assert stored.id == field.id
        assert stored.type == field.type
        assert stored.order == field.order == 1
        assert stored.label == "Email Address"
        assert stored.placeholder == "you@example.com"
        assert stored.required is True
        assert stored.options is None
        assert editor.is_open is False

    def test_commit_options(self, designer, editor):
        field = designer.insert_field(FieldType.RADIO)
        editor.open(field)
        editor.replace_options(["Yes", "No"])

        editor.save()

        assert designer.get_field(field.id).options == ["Yes", "No"]
        assert designer.get_field(field.id).placeholder is None

    def test_empty_label_rejected(self, designer, editor):
        field = designer.insert_field(FieldType.TEXT)
        editor.open(field)
        editor.set_label("")

        assert editor.can_save is False
        with pytest.raises(ValidationFailure) as exc_info:
            editor.save()

        assert exc_info.value.errors == {"label": LABEL_REQUIRED_MESSAGE}
        assert editor.is_open
        assert designer.get_field(field.id) == field

    def test_option_field_without_options_rejected(self, designer, editor):
        field = designer.insert_field(FieldType.SELECT)
        editor.open(field)
        editor.remove_option(1)
        editor.remove_option(0)

        with pytest.raises(ValidationFailure) as exc_info:
            editor.save()

        assert exc_info.value.errors == {"options": OPTIONS_REQUIRED_MESSAGE}

    def test_save_keeps_order_set_after_open(self, designer, editor):
        first = designer.insert_field(FieldType.TEXT)
        second = designer.insert_field(FieldType.TEXT)
        editor.open(first)
        designer.reorder(second.id, first.id)

        editor.set_label("Name")
        editor.save()

        assert designer.get_field(first.id).order == 1
        assert [f.id for f in designer.fields] == [second.id, first.id]

    def test_save_after_field_deleted_rejected(self, designer, editor):
        field = designer.insert_field(FieldType.TEXT)
        editor.open(field)
        designer.delete_field(field.id)

        editor.set_label("Name")
        with pytest.raises(DesignerInvariantError):
            editor.save()

        assert designer.fields == []
        assert editor.is_open
