"""Role policy: total order over admin roles and named permission predicates.

Everything here is advisory. The API re-checks every mutating request; these
predicates only decide what the console shows and where it navigates.

Role hierarchy (higher level -> more permissions):
    owner (3) > manager (2) > staff (1)

Unknown or missing roles have level 0 and every predicate fails closed for
them.
"""
from typing import Any, FrozenSet, Optional

from cafeconsole.models import AdminAccount, Role

_ROLE_HIERARCHY: dict[Role, int] = {
    Role.STAFF: 1,
    Role.MANAGER: 2,
    Role.OWNER: 3,
}

# Row actions offered by the admin roster
ACTION_EDIT = "edit"
ACTION_DELETE = "delete"
ACTION_RESET_PASSWORD = "reset_password"


def role_level(role: Any) -> int:
    parsed = Role.parse(role)
    return _ROLE_HIERARCHY.get(parsed, 0) if parsed else 0


def is_admin_role(role: Any) -> bool:
    return role_level(role) > 0


def meets_minimum(actual: Any, required: Any) -> bool:
    """True when ``actual`` is at least ``required`` in the role order."""
    actual_level = role_level(actual)
    required_level = role_level(required)
    if actual_level == 0 or required_level == 0:
        return False
    return actual_level >= required_level


def can_manage_admins(role: Any) -> bool:
    """Owner only; managers may not even open the admin roster."""
    return Role.parse(role) is Role.OWNER


def can_add_admin(role: Any) -> bool:
    return Role.parse(role) is Role.OWNER


def can_reset_password(role: Any) -> bool:
    return Role.parse(role) is Role.OWNER


def can_edit_admin(actor_role: Any, target_role: Any) -> bool:
    """Owner edits anyone, manager edits staff only, staff edits no one."""
    actor = Role.parse(actor_role)
    target = Role.parse(target_role)
    if actor is None or target is None:
        return False
    if actor is Role.OWNER:
        return True
    if actor is Role.MANAGER:
        return target is Role.STAFF
    return False


def can_delete_admin(
    actor_role: Any,
    actor_id: Optional[str] = None,
    target_id: Optional[str] = None,
    target_role: Any = None,
) -> bool:
    """Owner only. With a target given, also refuse self-deletion and owner targets.

    The self-id check does not depend on the role check: even an owner can
    never delete the account it is signed in as.
    """
    if Role.parse(actor_role) is not Role.OWNER:
        return False
    if target_id is None and target_role is None:
        return True
    if not actor_id or not target_id or actor_id == target_id:
        return False
    return Role.parse(target_role) in (Role.STAFF, Role.MANAGER)


def can_assign_role(actor_role: Any, new_role: Any, is_self: bool = False) -> bool:
    """Whether ``actor_role`` may set an account's role to ``new_role``.

    Owners may assign any role except demoting themselves; managers may only
    assign staff; staff assign nothing. No path lets an account raise its own
    role.
    """
    actor = Role.parse(actor_role)
    new = Role.parse(new_role)
    if actor is None or new is None:
        return False
    if actor is Role.OWNER:
        return not is_self or new is Role.OWNER
    if actor is Role.MANAGER:
        return new is Role.STAFF and not is_self
    return False


def can_manage_menu_or_inventory(role: Any) -> bool:
    return Role.parse(role) in (Role.OWNER, Role.MANAGER)


def can_manage_content(role: Any) -> bool:
    """Rewards, promos, feedback and gallery: any admin with a session."""
    return is_admin_role(role)


def row_actions(actor: AdminAccount, target: AdminAccount) -> FrozenSet[str]:
    """Actions the roster offers on ``target``'s row. Anything absent is not shown."""
    actions = set()
    if can_edit_admin(actor.role, target.role):
        actions.add(ACTION_EDIT)
    if can_delete_admin(actor.role, actor.id, target.id, target.role):
        actions.add(ACTION_DELETE)
    if can_reset_password(actor.role):
        actions.add(ACTION_RESET_PASSWORD)
    return frozenset(actions)
