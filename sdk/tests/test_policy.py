"""Tests for the role policy"""
import pytest

from cafeconsole.models import Role
from cafeconsole.policy import (
    ACTION_DELETE,
    ACTION_EDIT,
    ACTION_RESET_PASSWORD,
    can_add_admin,
    can_assign_role,
    can_delete_admin,
    can_edit_admin,
    can_manage_admins,
    can_manage_content,
    can_manage_menu_or_inventory,
    can_reset_password,
    meets_minimum,
    role_level,
    row_actions,
)

ROLES = ["staff", "manager", "owner"]


def test_role_levels():
    assert role_level("staff") == 1
    assert role_level("manager") == 2
    assert role_level("owner") == 3
    assert role_level(Role.OWNER) == 3
    assert role_level("barista") == 0
    assert role_level(None) == 0


@pytest.mark.parametrize("actual", ROLES)
@pytest.mark.parametrize("required", ROLES)
def test_meets_minimum_follows_order(actual, required):
    assert meets_minimum(actual, required) == (ROLES.index(actual) >= ROLES.index(required))


@pytest.mark.parametrize("bad", [None, "", "admin", "OWNER", 3])
def test_unknown_roles_fail_closed(bad):
    """Test that every predicate denies an unknown role"""
    assert not meets_minimum(bad, "staff")
    assert not meets_minimum("owner", bad)
    assert not can_manage_admins(bad)
    assert not can_add_admin(bad)
    assert not can_reset_password(bad)
    assert not can_edit_admin(bad, "staff")
    assert not can_edit_admin("owner", bad)
    assert not can_delete_admin(bad)
    assert not can_assign_role(bad, "staff")
    assert not can_manage_menu_or_inventory(bad)
    assert not can_manage_content(bad)


def test_manage_admins_is_owner_only():
    assert can_manage_admins("owner")
    assert not can_manage_admins("manager")
    assert not can_manage_admins("staff")
    assert can_add_admin("owner") and not can_add_admin("manager")
    assert can_reset_password("owner") and not can_reset_password("manager")


def test_can_edit_admin():
    for target in ROLES:
        assert can_edit_admin("owner", target)
    assert can_edit_admin("manager", "staff")
    assert not can_edit_admin("manager", "manager")
    assert not can_edit_admin("manager", "owner")
    for target in ROLES:
        assert not can_edit_admin("staff", target)


def test_can_delete_admin_owner_only():
    assert can_delete_admin("owner")
    assert not can_delete_admin("manager")
    assert not can_delete_admin("staff")


def test_can_delete_admin_targets():
    assert can_delete_admin("owner", "adm_1", "adm_2", "staff")
    assert can_delete_admin("owner", "adm_1", "adm_2", "manager")
    assert not can_delete_admin("owner", "adm_1", "adm_2", "owner")
    assert not can_delete_admin("manager", "adm_1", "adm_2", "staff")


def test_owner_never_deletes_self():
    """Test that self-deletion is refused whatever the roles claim"""
    for target_role in ROLES:
        assert not can_delete_admin("owner", "adm_1", "adm_1", target_role)
    assert not can_delete_admin("owner", None, "adm_1", "staff")


def test_can_assign_role():
    for role in ROLES:
        assert can_assign_role("owner", role)
    assert can_assign_role("owner", "owner", is_self=True)
    assert not can_assign_role("owner", "manager", is_self=True)
    assert can_assign_role("manager", "staff")
    assert not can_assign_role("manager", "manager")
    assert not can_assign_role("manager", "staff", is_self=True)
    assert not can_assign_role("staff", "staff")


def test_screen_permissions():
    assert can_manage_menu_or_inventory("owner")
    assert can_manage_menu_or_inventory("manager")
    assert not can_manage_menu_or_inventory("staff")
    for role in ROLES:
        assert can_manage_content(role)


def test_row_actions_for_manager(account):
    """A manager is offered edit on staff rows and nothing on manager rows"""
    actor = account("manager", id="adm_m1")
    assert row_actions(actor, account("staff", id="adm_s1")) == {ACTION_EDIT}
    assert row_actions(actor, account("manager", id="adm_m2")) == frozenset()
    assert row_actions(actor, account("owner", id="adm_o1")) == frozenset()


def test_row_actions_for_owner(account):
    actor = account("owner", id="adm_o1")
    assert row_actions(actor, account("staff", id="adm_s1")) == {ACTION_EDIT, ACTION_DELETE, ACTION_RESET_PASSWORD}
    assert row_actions(actor, account("manager", id="adm_m1")) == {ACTION_EDIT, ACTION_DELETE, ACTION_RESET_PASSWORD}
    assert row_actions(actor, account("owner", id="adm_o2")) == {ACTION_EDIT, ACTION_RESET_PASSWORD}
    assert ACTION_DELETE not in row_actions(actor, actor)


def test_row_actions_for_staff(account):
    actor = account("staff", id="adm_s1")
    assert row_actions(actor, account("staff", id="adm_s2")) == frozenset()
