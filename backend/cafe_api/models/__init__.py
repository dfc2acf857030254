"""Database models"""
from cafe_api.models.admin_account import AdminAccount
from cafe_api.models.admin_activity import AdminActivity

__all__ = ["AdminAccount", "AdminActivity"]
