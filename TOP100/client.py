"""
Spotify Web API 공통 요청 헬퍼
"""
import logging
from typing import Dict, Optional

import httpx

from .auth import Credentials
from .constants import NO_RESPONSE_STATUS
from .errors import UpstreamError

logger = logging.getLogger(__name__)


def create_client(timeout: float = 30.0) -> httpx.AsyncClient:
    """파이프라인 1회 실행 동안 공유하는 AsyncClient"""
    return httpx.AsyncClient(timeout=timeout)


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    credentials: Credentials,
    params: Optional[Dict] = None,
) -> Dict:
    """
    인증 헤더를 붙여 GET 요청 후 JSON 객체를 반환한다.
    블로킹 단계(목록/트랙/피처) 전용 — 실패 시 즉시 UpstreamError.

    Raises:
        UpstreamError: 네트워크 오류 / 잘못된 URL / non-2xx / JSON 객체가 아닌 본문
    """
    try:
        resp = await client.get(url, headers=credentials.headers, params=params)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"[Spotify] {url} → request error: {e}")
        raise UpstreamError(NO_RESPONSE_STATUS, str(url), reason=str(e)) from e

    if not resp.is_success:
        logger.error(f"[Spotify] {url} → HTTP {resp.status_code}")
        raise UpstreamError(resp.status_code, str(resp.request.url))

    try:
        data = resp.json()
    except ValueError as e:
        logger.error(f"[Spotify] {url} → HTTP {resp.status_code}, JSON 아님")
        raise UpstreamError(
            resp.status_code, str(resp.request.url), reason="response body is not JSON"
        ) from e

    if not isinstance(data, dict):
        raise UpstreamError(
            resp.status_code, str(resp.request.url), reason="response body is not a JSON object"
        )
    return data
