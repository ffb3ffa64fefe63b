from pydantic import BaseModel, Field
from typing import Optional, Union
from uuid import UUID
from datetime import datetime

DEPARTMENTAL_CATEGORY = "DEPARTMENTAL"


class SystemConfigWrite(BaseModel):
    key: str = Field(min_length=1)
    value: str
    description: Optional[str] = None
    category: Optional[str] = None


class SystemConfigRead(BaseModel):
    id: UUID
    key: str
    value: str
    description: Optional[str] = None
    category: Optional[str] = None
    updated_by: Optional[UUID] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class ConfigCheck(BaseModel):
    key: str
    value: Union[bool, float, str, None] = None
    type: str
