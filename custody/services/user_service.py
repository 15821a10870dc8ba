# custody/services/user_service.py

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from custody.core import messages
from custody.core.roles import ROLE_EMPLOYEE, ROLES
from custody.core.security import hash_password
from custody.models.user import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _validate_role(role: str) -> str:
    if role not in ROLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=messages.INVALID_ROLE,
        )
    return role


def _get_or_404(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=messages.USER_NOT_FOUND,
        )
    return user


def _email_conflict():
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=messages.EMAIL_TAKEN,
    )


def get_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == normalize_email(email)).first()


def list_users(db: Session):
    try:
        return db.query(User).order_by(User.created_at.desc()).all()
    except SQLAlchemyError:
        logger.exception("Error fetching users")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.USERS_FETCH_FAILED,
        )


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: str = None,
    failure_message: str = messages.USER_CREATE_FAILED,
) -> User:
    role = _validate_role(role or ROLE_EMPLOYEE)
    email = normalize_email(email)

    if get_by_email(db, email):
        raise _email_conflict()

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name,
        role=role,
    )

    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # lost a race on the unique email index
        db.rollback()
        raise _email_conflict()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating user email=%s", email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_message,
        )

    db.refresh(user)
    logger.info("User created id=%s role=%s", user.id, user.role)
    return user


def update_user(
    db: Session,
    user_id: str,
    name: str,
    email: str,
    role: str,
    password: str = None,
) -> User:
    user = _get_or_404(db, user_id)
    role = _validate_role(role)
    email = normalize_email(email)

    other = get_by_email(db, email)
    if other and other.id != user.id:
        raise _email_conflict()

    user.name = name
    user.email = email
    user.role = role
    if password:
        user.password_hash = hash_password(password)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _email_conflict()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating user id=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.USER_UPDATE_FAILED,
        )

    db.refresh(user)
    logger.info("User updated id=%s", user.id)
    return user


def set_role(db: Session, user_id: str, role: str) -> User:
    role = _validate_role(role)
    user = _get_or_404(db, user_id)

    user.role = role
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating role of user id=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.ROLE_UPDATE_FAILED,
        )

    logger.info("User role changed id=%s role=%s", user_id, role)
    return user


def delete_user(db: Session, user_id: str, current_user: User) -> None:
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=messages.SELF_DELETE,
        )

    user = _get_or_404(db, user_id)

    try:
        db.delete(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting user id=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.USER_DELETE_FAILED,
        )

    logger.info("User deleted id=%s", user_id)
