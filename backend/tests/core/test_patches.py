"""Typed Patches — tests for partial update structures.

Tests cover:
    - UNSET fields never reach the column map
    - None is kept (clears the column) where allowed
    - narrowed() removes fields outside the allowed set
    - Address flattening with blanks stored as NULL
"""

from datetime import datetime, timezone
from uuid import uuid4

from taskhub.core.domain_types import Role, TaskPriority, TaskStatus
from taskhub.core.patches import UNSET, Address, TaskPatch, UserPatch, is_set


def test_unset_is_falsy_singleton():
    assert not UNSET
    assert not is_set(UNSET)
    assert is_set(None)


def test_empty_task_patch_has_no_columns():
    patch = TaskPatch()
    assert patch.to_columns() == {}
    assert patch.present_fields() == []


def test_task_patch_maps_enums_to_values():
    due = datetime(2030, 1, 1, tzinfo=timezone.utc)
    patch = TaskPatch(
        status=TaskStatus.COMPLETED, priority=TaskPriority.LOW, due_date=due,
    )
    assert patch.to_columns() == {
        "status": "completed", "priority": "low", "due_date": due,
    }


def test_blank_description_clears_column():
    assert TaskPatch(description="").to_columns() == {"description": None}


def test_null_assignee_is_kept():
    assert TaskPatch(assigned_to=None).to_columns() == {"assigned_to": None}


def test_narrowed_task_patch_keeps_only_allowed_fields():
    patch = TaskPatch(
        title="new", status=TaskStatus.COMPLETED, assigned_to=uuid4(),
    )
    narrowed = patch.narrowed(frozenset({"status", "description"}))
    assert narrowed.present_fields() == ["status"]
    assert narrowed.to_columns() == {"status": "completed"}


def test_narrowed_with_none_keeps_everything():
    patch = TaskPatch(title="t")
    assert patch.narrowed(None) is patch


def test_address_flattens_with_blanks_as_null():
    columns = Address(city="Lisbon", postal_code="").to_columns()
    assert columns["city"] == "Lisbon"
    assert columns["postal_code"] is None
    assert set(columns) == {
        "address_line1", "address_line2", "city",
        "state_or_province", "postal_code", "country",
    }


def test_user_patch_role_dropped_when_narrowed():
    patch = UserPatch(name="Ana", role=Role.ADMIN)
    narrowed = patch.narrowed(frozenset({"name", "email"}))
    assert narrowed.to_columns() == {"name": "Ana"}


def test_user_patch_flattens_address_and_blank_phone():
    patch = UserPatch(phone_number="", address=Address(country="PT"))
    columns = patch.to_columns()
    assert columns["phone_number"] is None
    assert columns["country"] == "PT"
    assert patch.present_fields() == ["phone_number", "address"]
