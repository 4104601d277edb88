"""
Retry Coordinator — 실패한 오디오 분석 요청 1회 재시도

1. 실패 목록에서 429를 찾아 대기 시간 계산 (Retry-After + 2초, 헤더 없으면 0 + 2초)
   429가 없으면 대기 없음
2. 한 번 대기한 뒤 실패한 URL마다 1건씩 동시에 재요청 (추가 재시도 없음)
3. 200은 병합, 나머지는 잔여 실패로 집계 후 버림

잔여 실패는 경고 로그로만 남기고 전체 작업을 실패시키지 않는다.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence

import httpx

from .analysis import make_semaphore, request_analysis
from .auth import Credentials
from .constants import BACKOFF_FIRST, BACKOFF_MAX, RETRY_PADDING_SECONDS
from .errors import InvalidArgument
from .models import FailureRecord, RetryOutcome

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

BACKOFF_STRATEGIES = (BACKOFF_FIRST, BACKOFF_MAX)


def validate_strategy(strategy: str) -> str:
    """요청을 보내기 전에 백오프 계산 방식을 확인한다."""
    if strategy not in BACKOFF_STRATEGIES:
        raise InvalidArgument(
            f"Unknown backoff strategy: {strategy!r} "
            f"(expected one of {', '.join(BACKOFF_STRATEGIES)})"
        )
    return strategy


def compute_backoff_delay(
    failures: Sequence[FailureRecord],
    strategy: str = BACKOFF_FIRST,
) -> float:
    """
    재시도 전 대기 시간(초)을 계산한다.

    strategy:
        "first" — 처음 발견된 429의 Retry-After 사용
        "max"   — 모든 429 중 가장 긴 Retry-After 사용
    """
    validate_strategy(strategy)
    waits = [
        (f.retry_after_seconds or 0) + RETRY_PADDING_SECONDS
        for f in failures
        if f.is_rate_limited
    ]
    if not waits:
        return 0
    if strategy == BACKOFF_MAX:
        return max(waits)
    return waits[0]


async def retry_once(
    failures: Sequence[FailureRecord],
    credentials: Credentials,
    client: httpx.AsyncClient,
    sleep: Sleep = asyncio.sleep,
    strategy: str = BACKOFF_FIRST,
    max_concurrency: Optional[int] = None,
) -> RetryOutcome:
    """
    실패한 분석 요청을 한 번만 재시도한다.

    Args:
        failures: fetch_analyses가 수집한 FailureRecord 목록
        sleep: 대기 함수 (테스트에서 교체)
        strategy: 백오프 계산 방식
        max_concurrency: 동시 요청 상한 (None = 무제한)

    Returns:
        RetryOutcome(analyses={track_id: analysis}, residual_failures, delay)
    """
    validate_strategy(strategy)
    outcome = RetryOutcome()
    if not failures:
        return outcome

    outcome.delay = compute_backoff_delay(failures, strategy)
    if outcome.delay > 0:
        logger.info(
            f"[Retry] Rate limit 감지 → {outcome.delay}s 대기 후 {len(failures)}건 재시도"
        )
        await sleep(outcome.delay)

    targets = []
    for failure in failures:
        target = failure.target()
        if target is None:
            outcome.residual_failures += 1
            continue
        targets.append(target)

    semaphore = make_semaphore(max_concurrency)
    responses = await asyncio.gather(
        *[request_analysis(client, t, credentials, semaphore) for t in targets]
    )

    for response in responses:
        if isinstance(response, FailureRecord):
            outcome.residual_failures += 1
            continue
        track_id, payload = response
        outcome.analyses[track_id] = payload

    if outcome.residual_failures:
        logger.warning(
            f"[Retry] 오디오 분석(Low Level)을 가져오지 못한 곡 수: {outcome.residual_failures}"
        )
    else:
        logger.info(f"[Retry] 재시도 {len(targets)}건 모두 성공")
    return outcome
