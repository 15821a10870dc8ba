from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserRow(BaseModel):
    id: str
    name: str
    email: str
    role: str
    created_at: datetime

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    role: Optional[str] = None


class UserUpdate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    role: str
    # empty or missing keeps the current password
    password: Optional[str] = None


class RoleUpdate(BaseModel):
    role: str


class MessageResponse(BaseModel):
    message: str
