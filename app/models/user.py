# app/models/user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, String, Uuid
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
import uuid
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    FACULTY_ADMIN = "FACULTY_ADMIN"
    DEPARTMENTAL_OFFICER = "DEPARTMENTAL_OFFICER"
    LECTURER = "LECTURER"
    COURSE_REP = "COURSE_REP"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    name: str = Field(nullable=False)
    email: str = Field(nullable=False, index=True, unique=True)
    password_hash: str = Field(nullable=False)

    # role is assigned once at account creation and carried in the session token
    role: UserRole = Field(
        sa_column=Column(SAEnum(UserRole, name="user_role"), nullable=False)
    )

    department: Optional[str] = Field(
        default=None,
        sa_column=Column(String(128), nullable=True)
    )

    employee_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True)
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
