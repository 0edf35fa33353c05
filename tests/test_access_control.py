import itertools

import pytest

from enums.user_role import UserRole
from services.access_control import (
    can_change_status,
    can_delete_ticket,
    can_edit_ticket,
    can_view_ticket,
    is_privileged,
)

CREATOR, ASSIGNEE, TENANT_OF_RECORD, STRANGER = 1, 2, 3, 99


@pytest.mark.parametrize("role", ["owner", "admin", "senior_admin", UserRole.OWNER])
def test_privileged_roles_can_do_everything(role):
    args = (role, STRANGER, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert is_privileged(role)
    assert can_view_ticket(*args)
    assert can_edit_ticket(*args)
    assert can_delete_ticket(*args)
    assert can_change_status(*args)


def test_tenant_views_as_creator_or_tenant_of_record():
    assert can_view_ticket("tenant", CREATOR, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert can_view_ticket("tenant", TENANT_OF_RECORD, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert not can_view_ticket("tenant", STRANGER, CREATOR, ASSIGNEE, TENANT_OF_RECORD)


def test_tenant_edits_only_as_creator():
    assert can_edit_ticket("tenant", CREATOR, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert not can_edit_ticket("tenant", TENANT_OF_RECORD, CREATOR, ASSIGNEE, TENANT_OF_RECORD)


def test_worker_views_and_changes_status_only_when_assigned():
    assert can_view_ticket("worker", ASSIGNEE, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert can_change_status("worker", ASSIGNEE, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert not can_view_ticket("worker", STRANGER, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert not can_change_status("worker", STRANGER, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert not can_edit_ticket("worker", ASSIGNEE, CREATOR, ASSIGNEE, TENANT_OF_RECORD)


def test_creator_of_any_role_may_delete():
    assert can_delete_ticket("worker", CREATOR, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert can_delete_ticket("tenant", CREATOR, CREATOR, ASSIGNEE, TENANT_OF_RECORD)
    assert not can_delete_ticket("tenant", TENANT_OF_RECORD, CREATOR, ASSIGNEE, TENANT_OF_RECORD)


def test_tenant_cannot_change_status():
    assert not can_change_status("tenant", CREATOR, CREATOR, ASSIGNEE, TENANT_OF_RECORD)


def test_ids_compare_across_types():
    assert can_view_ticket("tenant", "1", 1, None, None)


def test_missing_references_deny():
    assert not can_view_ticket("tenant", None, None, None, None)
    assert not can_view_ticket("worker", 5, 1, None, 3)
    assert not can_delete_ticket("tenant", None, None)


class Unprintable:
    def __str__(self):
        raise RuntimeError("no string form")


ODD_VALUES = [None, "", "ghost", 0, 1, "1", 3.5, [], {}, object(), Unprintable(), UserRole.WORKER]
PREDICATES = [can_view_ticket, can_edit_ticket, can_delete_ticket, can_change_status]


@pytest.mark.parametrize("predicate", PREDICATES)
def test_predicates_are_total(predicate):
    for role, actor, creator, assignee in itertools.product(ODD_VALUES[:6] + ODD_VALUES[-2:], repeat=4):
        result = predicate(role, actor, creator, assignee, Unprintable())
        assert isinstance(result, bool)


@pytest.mark.parametrize("role", [None, "", "landlord", 42, ["owner"]])
def test_unknown_roles_are_denied(role):
    for predicate in PREDICATES:
        assert predicate(role, CREATOR, CREATOR, CREATOR, CREATOR) is False
