"""JWT 세션 토큰 생성 및 검증 유틸리티 모듈.

JWT session token creation and verification utility module.

JWT Payload Structure:
    {
        "sub": "user@kakao.com",    # 카카오 계정 이메일 (Subject: account e-mail)
        "id": "user_uuid",          # 로컬 사용자 ID (Local user identifier)
        "nickname": "홍길동",        # 카카오 닉네임 (Kakao nickname)
        "exp": 1234567890           # 만료 시간 UNIX timestamp (Expiration)
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from mentoring.config import settings


def create_access_token(
    data: dict[str, Any],
    secret_key: str | None = None,
    algorithm: str | None = None,
    expire_minutes: int | None = None,
) -> str:
    """JWT 세션 토큰을 생성합니다.

    Generate a signed, time-limited bearer token with the given claims.
    Signing parameters default to the global settings.

    Args:
        data: JWT 페이로드 데이터 (Claims to embed)
        secret_key: 서명 비밀키 (HMAC secret, default: settings.JWT_SECRET_KEY)
        algorithm: 서명 알고리즘 (Algorithm, default: settings.JWT_ALGORITHM)
        expire_minutes: 만료 시간(분) (TTL, default: settings.JWT_EXPIRE_MINUTES)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    to_encode: dict[str, Any] = data.copy()
    ttl: int = expire_minutes if expire_minutes is not None else settings.JWT_EXPIRE_MINUTES
    # 만료 시간 설정 — 현재 UTC 시간 + 설정된 분 수 (Set expiration from current UTC + configured minutes)
    expire: datetime = datetime.now(timezone.utc) + timedelta(minutes=ttl)
    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        secret_key or settings.JWT_SECRET_KEY,
        algorithm=algorithm or settings.JWT_ALGORITHM,
    )


def decode_token(
    token: str,
    secret_key: str | None = None,
    algorithm: str | None = None,
) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(
        token,
        secret_key or settings.JWT_SECRET_KEY,
        algorithms=[algorithm or settings.JWT_ALGORITHM],
    )
