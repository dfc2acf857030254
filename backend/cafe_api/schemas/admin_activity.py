"""Admin activity schemas"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class AdminActivityResponse(BaseModel):
    """One entry of the admin activity log"""

    id: int
    timestamp: datetime
    actor_id: str
    actor_name: str
    actor_role: str
    action: str
    target_id: Optional[str] = None
    target_name: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True
