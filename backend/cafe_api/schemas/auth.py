"""Authentication schemas"""
from pydantic import BaseModel, Field

from cafe_api.schemas.admin_account import AdminAccountResponse


class LoginRequest(BaseModel):
    email: str
    password: str
    remember_me: bool = Field(False, description="Issue a long-lived token for a persistent session")


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int   # seconds until expiry
    user: AdminAccountResponse


class MessageResponse(BaseModel):
    message: str
