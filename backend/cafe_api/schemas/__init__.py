"""Pydantic schemas for request/response validation"""
from cafe_api.schemas.admin_account import (
    AdminAccountCreate,
    AdminAccountResponse,
    AdminAccountUpdate,
    PasswordReset,
)
from cafe_api.schemas.admin_activity import AdminActivityResponse
from cafe_api.schemas.auth import LoginRequest, LoginResponse, MessageResponse

__all__ = [
    "AdminAccountCreate",
    "AdminAccountResponse",
    "AdminAccountUpdate",
    "PasswordReset",
    "AdminActivityResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
]
