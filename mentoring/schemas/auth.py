"""카카오 OAuth 및 세션 토큰 Pydantic 스키마 정의.

Kakao OAuth payload and session token Pydantic schema definitions.
Provider responses carry more fields than listed; unknown fields are ignored.
"""

from pydantic import BaseModel


class KakaoTokenResponse(BaseModel):
    """카카오 토큰 발급 응답 스키마.

    Response of the Kakao authorization-code token exchange.

    Attributes:
        access_token: 카카오 액세스 토큰 (Provider access token)
        token_type: 토큰 유형 (Always "bearer")
        refresh_token: 카카오 리프레시 토큰 (Provider refresh token, unused)
        expires_in: 액세스 토큰 만료(초) (Access token TTL in seconds)
        scope: 동의 항목 (Granted scopes)
    """

    access_token: str
    token_type: str = "bearer"
    refresh_token: str | None = None
    expires_in: int | None = None
    scope: str | None = None
    refresh_token_expires_in: int | None = None


class KakaoProfileInfo(BaseModel):
    """kakao_account.profile — 닉네임 및 프로필 이미지."""

    nickname: str | None = None
    profile_image_url: str | None = None


class KakaoAccount(BaseModel):
    """kakao_account — 계정 이메일 및 프로필."""

    email: str
    profile: KakaoProfileInfo = KakaoProfileInfo()


class KakaoProfile(BaseModel):
    """카카오 사용자 정보 응답 스키마 (POST /v2/user/me).

    Attributes:
        id: 카카오 회원 번호 (Kakao member id)
        kakao_account: 계정 정보 (Account block with e-mail and profile)
    """

    id: int
    kakao_account: KakaoAccount


class TokenResponse(BaseModel):
    """세션 토큰 발급 응답 스키마.

    Session token issued after a successful Kakao login.

    Attributes:
        access_token: 서명된 세션 JWT (Signed bearer credential)
        token_type: 토큰 유형 (Always "bearer")
    """

    access_token: str
    token_type: str = "bearer"
