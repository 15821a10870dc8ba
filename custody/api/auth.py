import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from custody.core import messages
from custody.core.roles import ROLE_EMPLOYEE
from custody.core.security import (
    create_access_token,
    decode_access_token,
    verify_password,
)
from custody.db.session import get_db
from custody.models.user import User
from custody.schemas.auth import AuthUser, LoginRequest, RegisterRequest, TokenResponse
from custody.services import user_service

logger = logging.getLogger(__name__)

# auto_error off: a missing token is 401, a bad one 403
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


router = APIRouter(tags=["Auth"])


def _token_response(user: User) -> TokenResponse:
    token = create_access_token({
        "id": user.id,
        "email": user.email,
        "role": user.role,
    })
    return TokenResponse(token=token, user=AuthUser.model_validate(user))


# -------------------------
# REGISTER
# -------------------------
@router.post("/register", response_model=TokenResponse, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = user_service.create_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=ROLE_EMPLOYEE,
        failure_message=messages.REGISTER_FAILED,
    )
    return _token_response(user)


# -------------------------
# LOGIN
# -------------------------
@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = user_service.get_by_email(db, payload.email)
    except SQLAlchemyError:
        logger.exception("Error looking up user on login")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.LOGIN_FAILED,
        )

    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=messages.INVALID_CREDENTIALS,
        )

    return _token_response(user)


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=messages.NOT_AUTHENTICATED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    forbidden = HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=messages.INVALID_TOKEN,
    )

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise forbidden

    user_id = payload.get("id")
    if not user_id:
        raise forbidden

    user = db.get(User, user_id)
    if not user:
        raise forbidden

    return user


@router.get("/me", response_model=AuthUser)
def me(current_user: User = Depends(get_current_user)):
    return current_user
