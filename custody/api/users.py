# custody/api/users.py

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from custody.api.auth import get_current_user
from custody.core import messages
from custody.core.permissions import require_roles
from custody.core.roles import MANAGER_ROLES
from custody.db.session import get_db
from custody.models.user import User
from custody.schemas.user import (
    MessageResponse,
    RoleUpdate,
    UserCreate,
    UserRow,
    UserUpdate,
)
from custody.services import user_service

router = APIRouter(
    tags=["Users"],
    dependencies=[Depends(require_roles(MANAGER_ROLES))],
)


@router.get("", response_model=List[UserRow])
def list_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.post("", response_model=UserRow, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return user_service.create_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )


@router.put("/{user_id}", response_model=MessageResponse)
def update_user(user_id: str, payload: UserUpdate, db: Session = Depends(get_db)):
    user_service.update_user(
        db,
        user_id,
        name=payload.name,
        email=payload.email,
        role=payload.role,
        password=payload.password,
    )
    return {"message": messages.USER_UPDATED}


@router.put("/{user_id}/role", response_model=MessageResponse)
def update_user_role(user_id: str, payload: RoleUpdate, db: Session = Depends(get_db)):
    user_service.set_role(db, user_id, payload.role)
    return {"message": messages.ROLE_UPDATED}


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_service.delete_user(db, user_id, current_user)
    return {"message": messages.USER_DELETED}
