import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from custody.core.roles import ROLE_EMPLOYEE
from custody.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default=ROLE_EMPLOYEE)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
