"""
Analysis Fan-out Engine — 트랙별 오디오 분석(Low level) 동시 조회

각 AnalysisTarget마다 독립 요청을 asyncio.gather로 동시에 발행한다.
- 200      → 성공, 요청 발행 시 묶어둔 track_id로 저장
- 그 외     → FailureRecord (status, url, Retry-After)
- 네트워크 오류 / 잘못된 URL → FailureRecord (status 0)

개별 실패는 예외로 올리지 않는다. 배치 전체가 401이면 AuthError.
"""
import asyncio
import logging
from typing import Optional, Sequence, Union

import httpx

from .auth import Credentials
from .constants import NO_RESPONSE_STATUS, RETRY_AFTER_HEADER
from .errors import AuthError
from .models import AnalysisBatch, AnalysisTarget, FailureRecord

logger = logging.getLogger(__name__)

# (track_id, payload) 또는 실패
AnalysisResponse = Union[tuple, FailureRecord]


def parse_retry_after(headers) -> Optional[int]:
    """Retry-After 헤더(초) 해석. 없거나 숫자가 아니면 None."""
    value = headers.get(RETRY_AFTER_HEADER)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"[Analysis] Invalid Retry-After header: {value}")
        return None


async def _send(
    client: httpx.AsyncClient,
    target: AnalysisTarget,
    credentials: Credentials,
) -> AnalysisResponse:
    try:
        resp = await client.get(target.url, headers=credentials.headers)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        # InvalidURL은 HTTPError 계열이 아니므로 따로 잡는다
        response = getattr(e, "response", None)
        status = getattr(response, "status_code", NO_RESPONSE_STATUS)
        logger.debug(f"[Analysis] {target.track_id} → request error: {e}")
        return FailureRecord(
            http_status=status,
            source_url=target.url,
            retry_after_seconds=None,
            track_id=target.track_id,
        )

    if resp.status_code != 200:
        logger.debug(f"[Analysis] {target.track_id} → HTTP {resp.status_code}")
        return FailureRecord(
            http_status=resp.status_code,
            source_url=target.url,
            retry_after_seconds=parse_retry_after(resp.headers),
            track_id=target.track_id,
        )

    try:
        return target.track_id, resp.json()
    except ValueError:
        logger.debug(f"[Analysis] {target.track_id} → invalid JSON body")
        return FailureRecord(
            http_status=resp.status_code,
            source_url=target.url,
            track_id=target.track_id,
        )


async def request_analysis(
    client: httpx.AsyncClient,
    target: AnalysisTarget,
    credentials: Credentials,
    semaphore: Optional[asyncio.Semaphore] = None,
) -> AnalysisResponse:
    """분석 요청 1건. semaphore가 있으면 동시 요청 수를 제한한다."""
    if semaphore is None:
        return await _send(client, target, credentials)
    async with semaphore:
        return await _send(client, target, credentials)


def make_semaphore(max_concurrency: Optional[int]) -> Optional[asyncio.Semaphore]:
    if not max_concurrency or max_concurrency <= 0:
        return None
    return asyncio.Semaphore(max_concurrency)


async def fetch_analyses(
    targets: Sequence[AnalysisTarget],
    credentials: Credentials,
    client: httpx.AsyncClient,
    max_concurrency: Optional[int] = None,
) -> AnalysisBatch:
    """
    모든 대상의 오디오 분석을 동시에 요청하고 성공/실패로 분류한다.

    Args:
        targets: (track_id, analysis_url) 목록
        max_concurrency: 동시 요청 상한 (None = 무제한)

    Returns:
        AnalysisBatch(successes={track_id: analysis}, failures=[FailureRecord])

    Raises:
        AuthError: 모든 요청이 401 (토큰 자체가 거부됨)
    """
    batch = AnalysisBatch()
    if not targets:
        return batch

    semaphore = make_semaphore(max_concurrency)
    responses = await asyncio.gather(
        *[request_analysis(client, t, credentials, semaphore) for t in targets]
    )

    for response in responses:
        if isinstance(response, FailureRecord):
            batch.failures.append(response)
        else:
            track_id, payload = response
            batch.successes[track_id] = payload

    if batch.failures and all(f.http_status == 401 for f in batch.failures) \
            and not batch.successes:
        raise AuthError("Audio analysis requests rejected: HTTP 401")

    rate_limited = sum(1 for f in batch.failures if f.is_rate_limited)
    logger.info(
        f"[Analysis] {len(batch.successes)}/{len(targets)} 성공, "
        f"{len(batch.failures)} 실패 (429: {rate_limited})"
    )
    return batch
