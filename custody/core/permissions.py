# custody/core/permissions.py
from fastapi import Depends, HTTPException, status

from custody.api.auth import get_current_user
from custody.core import messages
from custody.models.user import User


def require_roles(roles: list):
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=messages.NOT_AUTHORIZED,
            )
        return current_user

    return checker
