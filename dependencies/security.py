from dataclasses import dataclass
from typing import Optional, Annotated

import jwt
from fastapi import Depends, Header, HTTPException

from models.enums import Role
from models.students import Student
from utils.security import decode_access_token

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    role: Role


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(authorization: AuthHeader = None) -> CurrentUser:
    if not authorization:
        raise _unauthorized("Missing Authorization header")

    # "Bearer <토큰>"
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise _unauthorized("Invalid Authorization header format")

    if scheme.lower() != "bearer":
        raise _unauthorized("Invalid auth scheme")

    try:
        claims = decode_access_token(token.strip())
        return CurrentUser(user_id=int(claims["sub"]), role=Role(claims["role"]))
    except (jwt.PyJWTError, KeyError, ValueError):
        raise _unauthorized("Invalid or expired token")


def require_roles(*roles: Role):
    allowed = frozenset(roles)

    def _check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return _check


require_admin = require_roles(Role.ADMIN)
require_teacher = require_roles(Role.ADMIN, Role.TEACHER)


def can_view_student(user: CurrentUser, student: Student) -> bool:
    """호출자가 이 학생의 성적표를 볼 수 있는지 여부"""
    if user.role in (Role.ADMIN, Role.TEACHER):
        return True
    if user.role is Role.STUDENT:
        return student.user_id == user.user_id
    if user.role is Role.PARENT:
        return student.parent is not None and student.parent.user_id == user.user_id
    raise ValueError(f"unhandled role: {user.role}")
