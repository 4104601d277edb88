"""
Spotify 토큰 발급 (Client Credentials Grant)

발급된 토큰은 Credentials 객체로 반환되며, 이후 모든 호출에 명시적으로 전달한다.
만료/갱신은 다루지 않는다.
"""
import logging
from dataclasses import dataclass
from typing import Dict

import httpx

from .constants import TOKEN_URL
from .errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    access_token: str
    token_type: str = "Bearer"

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


async def authorize(
    client_id: str,
    client_secret: str,
    client: httpx.AsyncClient,
) -> Credentials:
    """
    client_id/client_secret으로 액세스 토큰을 발급받는다.

    Raises:
        AuthError: 인증 정보 누락, non-2xx 응답, 네트워크 오류
    """
    if not client_id or not client_secret:
        raise AuthError("Missing Spotify client id or client secret")

    try:
        resp = await client.post(
            TOKEN_URL,
            data={"grant_type": "client_credentials"},
            auth=(client_id, client_secret),
        )
    except httpx.HTTPError as e:
        logger.error(f"[Auth] 토큰 요청 실패: {e}")
        raise AuthError(f"Token request failed: {e}") from e

    if not resp.is_success:
        logger.error(f"[Auth] 토큰 발급 거부: HTTP {resp.status_code}")
        raise AuthError(f"Token request rejected: HTTP {resp.status_code}")

    try:
        data = resp.json()
        token = data["access_token"]
    except (ValueError, KeyError, TypeError) as e:
        raise AuthError("Token response has no access_token") from e

    logger.info("[Auth] 액세스 토큰 발급 완료")
    return Credentials(access_token=token, token_type=data.get("token_type", "Bearer"))
