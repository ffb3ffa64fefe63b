from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from app.models.user import UserRole


# ---------------------------------------------------------
# BASE
# ---------------------------------------------------------
class UserBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr


# ---------------------------------------------------------
# CREATE USER (Faculty admin creates any user)
# ---------------------------------------------------------
class UserCreate(UserBase):
    password: str = Field(min_length=6)
    role: UserRole
    department: Optional[str] = None
    employee_id: Optional[str] = None


# ---------------------------------------------------------
# READ USER (response)
# ---------------------------------------------------------
class UserRead(UserBase):
    id: UUID
    role: UserRole
    department: Optional[str] = None
    employee_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------------------------------------------------------
# UPDATE USER (role stays as created)
# ---------------------------------------------------------
class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    department: Optional[str] = None
    employee_id: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)

    class Config:
        extra = "forbid"
