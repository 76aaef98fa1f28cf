from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum

class UserRole(str, Enum):
    """Caller roles"""
    ADMIN = "Admin"
    OPERATOR = "Operator"
    COMMUTER = "Commuter"

class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.COMMUTER

class User(UserBase):
    id: int
    role: UserRole
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class AuthResponse(BaseModel):
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    user: User

class Principal(BaseModel):
    """Authenticated caller resolved from a bearer credential"""
    id: int
    name: Optional[str] = None
    role: UserRole
