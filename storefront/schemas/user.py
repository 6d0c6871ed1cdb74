"""
Pydantic schemas for users and authentication
"""
from pydantic import BaseModel, Field, EmailStr, ConfigDict
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    """Schema for registering a new user"""
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class UserLogin(BaseModel):
    """Schema for login credentials"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    """Schema for updating a user profile (all fields optional)"""
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)

    model_config = ConfigDict(extra="forbid")


class UserResponse(BaseModel):
    """Public-safe user representation"""
    id: int
    username: str
    email: str
    is_admin: bool
    profile_pic: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Schema for a successful login"""
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    user: UserResponse


class GoogleProfile(BaseModel):
    """Identity returned by Google after a successful sign-in"""
    google_id: str
    email: EmailStr
    username: str = Field(..., min_length=1, max_length=100)
    profile_pic: Optional[str] = Field(None, max_length=500)
