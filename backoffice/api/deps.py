from enum import Enum
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from pydantic import BaseModel


class Role(str, Enum):
    STAFF = "staff"
    MANAGER = "manager"
    ADMIN = "admin"


class CurrentUser(BaseModel):
    id: str
    role: Role = Role.STAFF


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Role = Header(Role.STAFF),
) -> CurrentUser:
    """Caller identity injected upstream by the authentication layer."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing caller identity.")
    return CurrentUser(id=x_user_id, role=x_user_role)


async def require_manager(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.role not in (Role.MANAGER, Role.ADMIN):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Denied. Admin/Manager required.")
    return user
