"""인증 서비스 — 카카오 OAuth 로그인 및 세션 토큰 발급 비즈니스 로직.

Auth Service — Kakao OAuth login and session token issuance.

Flow (login_with_kakao):
    1. 인가 코드를 카카오 액세스 토큰으로 교환 (exchange_code_for_token)
    2. 액세스 토큰으로 카카오 프로필 조회 (fetch_profile)
    3. 이메일로 로컬 사용자 조회, 없으면 생성 (resolve_or_create_user)
    4. 서명된 세션 JWT 발급 (issue_token)

Provider credentials are passed in explicitly through OAuthConfig;
the module singletons are built from Settings.
"""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

import httpx
import jwt
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from mentoring.config import settings
from mentoring.models.user import ROLE_USER, User
from mentoring.repositories.user_repository import user_repository
from mentoring.schemas.auth import KakaoProfile, KakaoTokenResponse, TokenResponse
from mentoring.utils.exceptions import ExternalServiceError, UnauthorizedError
from mentoring.utils.jwt import create_access_token, decode_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OAuthConfig:
    """카카오 OAuth 클라이언트 설정.

    Attributes:
        client_id: REST API 키 (Kakao REST API key)
        client_secret: 클라이언트 시크릿, 비어 있으면 전송 안 함 (Sent only when set)
        token_url: 토큰 발급 엔드포인트 (Token endpoint)
        profile_url: 사용자 정보 엔드포인트 (Profile endpoint)
        timeout: HTTP 타임아웃(초) (HTTP timeout in seconds)
    """

    client_id: str
    client_secret: str = ""
    token_url: str = "https://kauth.kakao.com/oauth/token"
    profile_url: str = "https://kapi.kakao.com/v2/user/me"
    timeout: float = 10.0

    @classmethod
    def from_settings(cls) -> "OAuthConfig":
        return cls(
            client_id=settings.KAKAO_CLIENT_ID,
            client_secret=settings.KAKAO_CLIENT_SECRET,
            token_url=settings.KAKAO_TOKEN_URL,
            profile_url=settings.KAKAO_PROFILE_URL,
            timeout=settings.OAUTH_TIMEOUT_SECONDS,
        )


class KakaoOAuthClient:
    """카카오 OAuth HTTP 클라이언트.

    Exchanges authorization codes and fetches profiles. Provider failures
    (transport errors, non-200 status, unparsable bodies) are logged and
    raised as ExternalServiceError; nothing is retried.
    """

    def __init__(
        self,
        config: OAuthConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config: OAuthConfig = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport)

    async def _post(self, url: str, what: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                response: httpx.Response = await client.post(url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Kakao %s request failed: %s", what, str(e))
            raise ExternalServiceError(f"Error while requesting {what}: {e}") from e

        if response.status_code != 200:
            logger.error("Kakao %s failed (%d): %s", what, response.status_code, response.text)
            raise ExternalServiceError(f"Error while obtaining {what}: {response.text}")
        return response

    async def exchange_code_for_token(self, code: str, redirect_uri: str) -> KakaoTokenResponse:
        """인가 코드를 카카오 액세스 토큰으로 교환합니다.

        POST form-encoded grant_type/client_id/redirect_uri/code to the token endpoint.

        Args:
            code: 카카오 인가 코드 (Authorization code)
            redirect_uri: 인가 요청 시 사용한 리다이렉트 URI (Redirect URI of the authorize call)

        Returns:
            KakaoTokenResponse: 토큰 응답 (Token response)

        Raises:
            ExternalServiceError: 비정상 응답 또는 파싱 실패 (Non-200 or unparsable response)
        """
        form: dict[str, str] = {
            "grant_type": "authorization_code",
            "client_id": self.config.client_id,
            "redirect_uri": redirect_uri,
            "code": code,
        }
        if self.config.client_secret:
            form["client_secret"] = self.config.client_secret

        response = await self._post(
            self.config.token_url,
            "access token",
            data=form,
            headers={"Content-Type": "application/x-www-form-urlencoded;charset=utf-8"},
        )
        try:
            return KakaoTokenResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error("Kakao token response could not be parsed: %s", response.text)
            raise ExternalServiceError("Failed to parse access token response") from e

    async def fetch_profile(self, access_token: str) -> KakaoProfile:
        """카카오 액세스 토큰으로 사용자 정보를 조회합니다.

        Raises:
            ExternalServiceError: 비정상 응답 또는 파싱 실패 (Non-200 or unparsable response)
        """
        response = await self._post(
            self.config.profile_url,
            "profile",
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/x-www-form-urlencoded;charset=utf-8",
            },
        )
        try:
            return KakaoProfile.model_validate_json(response.content)
        except ValidationError as e:
            logger.error("Kakao profile response could not be parsed: %s", response.text)
            raise ExternalServiceError("Failed to parse profile response") from e


class AuthService:
    """카카오 로그인 및 세션 토큰 발급 서비스.

    Session/token issuer: maps an authenticated Kakao identity to a local
    user and mints a signed, time-limited bearer credential. There is no
    refresh token or revocation.
    """

    def __init__(
        self,
        oauth_client: KakaoOAuthClient,
        secret_key: str,
        algorithm: str = "HS512",
        expire_minutes: int = 60 * 24 * 10,
    ) -> None:
        self.oauth_client: KakaoOAuthClient = oauth_client
        self._secret_key: str = secret_key
        self._algorithm: str = algorithm
        self._expire_minutes: int = expire_minutes

    async def exchange_code_for_token(self, code: str, redirect_uri: str) -> KakaoTokenResponse:
        return await self.oauth_client.exchange_code_for_token(code, redirect_uri)

    async def fetch_profile(self, access_token: str) -> KakaoProfile:
        return await self.oauth_client.fetch_profile(access_token)

    async def resolve_or_create_user(
        self,
        db: AsyncSession,
        profile: KakaoProfile,
    ) -> User:
        """카카오 프로필의 이메일로 사용자를 조회하고, 없으면 생성합니다.

        Look up the local user by the profile e-mail. A user with the same
        Kakao member id but a different e-mail (changed on the Kakao side) is
        reused and its e-mail updated. Otherwise a new user is created with
        ROLE_USER and the denormalized profile fields.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            profile: 카카오 프로필 (Kakao profile)

        Returns:
            User: 기존 또는 새로 생성된 사용자 (Existing or newly created user)
        """
        account = profile.kakao_account
        user: User | None = await user_repository.get_by_kakao_email(db, account.email)
        if user is not None:
            return user

        user = await user_repository.get_by_kakao_id(db, profile.id)
        if user is not None:
            user.kakao_email = account.email
            await db.flush()
            logger.info("Kakao e-mail changed for existing user", extra={"user_id": str(user.id), "kakao_id": profile.id})
            return user

        user = await user_repository.create(
            db,
            {
                "kakao_id": profile.id,
                "kakao_profile_img": account.profile.profile_image_url,
                "kakao_nickname": account.profile.nickname,
                "kakao_email": account.email,
                "user_role": ROLE_USER,
            },
        )
        logger.info("User created from Kakao login", extra={"user_id": str(user.id), "kakao_id": profile.id})
        return user

    def issue_token(self, user: User) -> str:
        """사용자에 대한 세션 JWT를 발급합니다.

        Claims: sub=kakao e-mail, id=local user id, nickname, exp.
        """
        return create_access_token(
            {
                "sub": user.kakao_email,
                "id": str(user.id),
                "nickname": user.kakao_nickname,
            },
            secret_key=self._secret_key,
            algorithm=self._algorithm,
            expire_minutes=self._expire_minutes,
        )

    async def login_with_kakao(
        self,
        db: AsyncSession,
        code: str,
        redirect_uri: str,
    ) -> TokenResponse:
        """인가 코드로 카카오 로그인을 처리하고 세션 토큰을 발급합니다.

        Process a Kakao authorization code end to end.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            code: 카카오 인가 코드 (Authorization code)
            redirect_uri: 리다이렉트 URI (Redirect URI)

        Returns:
            TokenResponse: 세션 토큰 응답 (Session token response)

        Raises:
            ExternalServiceError: 카카오 호출 실패 (Kakao call failed)
        """
        oauth_token: KakaoTokenResponse = await self.exchange_code_for_token(code, redirect_uri)
        profile: KakaoProfile = await self.fetch_profile(oauth_token.access_token)
        user: User = await self.resolve_or_create_user(db, profile)
        return TokenResponse(access_token=self.issue_token(user))

    async def get_user_from_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> User:
        """세션 토큰의 id 클레임으로 사용자를 조회합니다.

        Decode a session token and load the user named by its id claim.

        Raises:
            UnauthorizedError: 토큰이 유효하지 않거나 사용자가 없을 때
                               (Invalid/expired token or unknown user)
        """
        try:
            payload: dict[str, Any] = decode_token(token, self._secret_key, self._algorithm)
            user_id = UUID(str(payload["id"]))
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token has expired")
        except (jwt.InvalidTokenError, KeyError, ValueError):
            raise UnauthorizedError("Invalid token")

        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return user


# 싱글턴 인스턴스 — Singleton instances built from settings
kakao_oauth_client: KakaoOAuthClient = KakaoOAuthClient(OAuthConfig.from_settings())
auth_service: AuthService = AuthService(
    kakao_oauth_client,
    secret_key=settings.JWT_SECRET_KEY,
    algorithm=settings.JWT_ALGORITHM,
    expire_minutes=settings.JWT_EXPIRE_MINUTES,
)
