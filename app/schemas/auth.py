from typing import List, Optional
from pydantic import BaseModel, EmailStr

from app.core.permissions import Permission
from app.models.user import UserRole
from app.schemas.user import UserRead


# -------------------------------------------------------------------
# LOGIN REQUEST
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# -------------------------------------------------------------------
# TOKEN + USER DETAILS (login response)
# -------------------------------------------------------------------
class TokenWithUser(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user: UserRead


# -------------------------------------------------------------------
# CURRENT SESSION
# -------------------------------------------------------------------
class SessionRead(BaseModel):
    user_id: str
    role: UserRole
    permissions: List[Permission]
    dashboard: str
