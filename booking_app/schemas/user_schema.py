from pydantic import BaseModel, Field
from enum import Enum
from typing import Optional


class Role(str, Enum):
    user = "user"
    admin = "admin"


class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    ok: bool = True
    message: str
    user_id: str = Field(..., alias="userId")
    role: Role
    access_token: str
    token_type: str = "bearer"

    class Config:
        populate_by_name = True
