from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from datetime import datetime
from typing import Optional


def ensure_password_length(password: str) -> str:
    """bcrypt only looks at the first 72 bytes"""
    if len(password.encode('utf-8')) > 72:
        raise ValueError('Password cannot be longer than 72 bytes')
    return password


# Schema for user registration
class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=2, max_length=100)

    # Password validation
    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return ensure_password_length(v)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


# Schema for user login
class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class ProfileUpdate(BaseModel):
    """Self-service profile changes; role cannot be changed here"""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower() if v else v


# Schema for user response
class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    success: bool = True
    user: UserResponse
    token: str
    token_type: str = "bearer"
    expires_in: int
    message: str


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserResponse
    message: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
