from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from config.settings import settings
from models.enums import Role


def create_access_token(user_id: int, role: Role, expires_minutes: Optional[int] = None) -> str:
    """서명된 Bearer 토큰 발급 (스크립트 / 테스트용, 로그인은 별도 서비스)"""
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.JWT_EXPIRE_MINUTES
    )
    payload = {"sub": str(user_id), "role": Role(role).value, "exp": expires}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    # 서명 오류, 만료, 형식 오류 시 jwt.PyJWTError 발생
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
