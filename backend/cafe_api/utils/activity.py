"""Admin activity log helpers"""
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from cafe_api.models.admin_account import AdminAccount
from cafe_api.models.admin_activity import AdminActivity


def record_activity(
    db: Session,
    actor: AdminAccount,
    action: str,
    target: Optional[AdminAccount] = None,
    details: Optional[Dict[str, Any]] = None,
) -> AdminActivity:
    """
    Stage an activity entry on ``db``.

    Nothing is committed here; the entry lands in the same transaction as the
    change it describes. Actor and target names are copied at call time.
    """
    entry = AdminActivity(
        actor_id=actor.admin_id,
        actor_name=actor.full_name,
        actor_role=actor.role,
        action=action,
        target_id=target.admin_id if target is not None else None,
        target_name=target.full_name if target is not None else None,
        details=details,
    )
    db.add(entry)
    return entry
