"""AdminActivity model: append-only record of account management actions"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, JSON, String

from cafe_api.database import Base

ACTION_CREATE = "create_admin"
ACTION_UPDATE = "update_admin"
ACTION_RESET_PASSWORD = "reset_password"
ACTION_DELETE = "delete_admin"


class AdminActivity(Base):
    """One management action taken by an admin on another account.

    Actor and target are kept as plain ids and names rather than foreign keys
    so entries outlive the accounts they mention.
    """

    __tablename__ = "admin_activities"

    id = Column(Integer, primary_key=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    actor_id = Column(String(50), nullable=False, index=True)
    actor_name = Column(String(255), nullable=False)
    actor_role = Column(String(20), nullable=False)
    action = Column(String(50), nullable=False, index=True)
    target_id = Column(String(50), nullable=True, index=True)
    target_name = Column(String(255), nullable=True)
    details = Column(JSON, nullable=True)
