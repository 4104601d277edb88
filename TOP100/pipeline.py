"""
TOP100 Pipeline — 카테고리 상위 100곡 오디오 데이터 수집 오케스트레이터

단계 (앞 단계 결과가 다음 단계 입력):
1. Category Resolver : 카테고리 → 플레이리스트 → 트랙 목록 (ResultSet 생성)
2. Feature Fetcher   : 오디오 피처 1회 일괄 조회 → id로 매칭
3. Analysis Fan-out  : 트랙별 오디오 분석 동시 조회
4. Retry Coordinator : 실패분 1회 재시도 후 병합

1~2단계 실패(InvalidArgument / UpstreamError)는 즉시 전체 중단.
3~4단계 실패는 곡 단위로 흡수되고, 해당 곡은 analysis 없이 반환된다.
"""
import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import httpx

from .analysis import fetch_analyses
from .auth import Credentials, authorize
from .client import create_client
from .config import Top100Config, get_top100_config
from .constants import BACKOFF_FIRST
from .errors import Top100Error
from .features import analysis_targets, attach_features, fetch_features
from .models import BatchOutcome, ResultSet
from .resolver import resolve_tracklist
from .retry import Sleep, retry_once, validate_strategy
from .storage import output_filename, save_result

logger = logging.getLogger(__name__)


def _merge_analyses(result_set: ResultSet, analyses: Dict[str, Dict]) -> int:
    merged = 0
    for track_id, analysis in analyses.items():
        record = result_set.get(track_id)
        if record is None:
            continue
        record.analysis = analysis
        merged += 1
    return merged


async def get_top100_audio_data(
    category: str,
    credentials: Credentials,
    client: httpx.AsyncClient,
    sleep: Sleep = asyncio.sleep,
    strategy: str = BACKOFF_FIRST,
    max_concurrency: Optional[int] = None,
) -> ResultSet:
    """
    카테고리 첫 번째 플레이리스트의 상위 100곡에 피처/분석을 붙여 반환한다.

    Args:
        category: Spotify browse 카테고리 ID (예: "jazz", "caribbean")
        credentials: authorize()로 발급받은 토큰
        client: 공유 httpx.AsyncClient
        sleep: 재시도 대기 함수 (테스트에서 교체)
        strategy: 429 백오프 계산 방식 ("first" | "max")
        max_concurrency: 분석 요청 동시 상한 (None = 무제한)

    Returns:
        {track_id: TrackRecord}

    Raises:
        InvalidArgument: 빈 카테고리 / 플레이리스트 없음 / 알 수 없는 백오프 방식
        UpstreamError: 목록/트랙/피처 요청 non-2xx
        AuthError: 분석 요청 전체가 401
    """
    try:
        validate_strategy(strategy)

        # ========== 1단계: 트랙 목록 ==========
        records = await resolve_tracklist(category, credentials, client)
        result_set: ResultSet = {r.id: r for r in records}

        # ========== 2단계: 오디오 피처 ==========
        features = await fetch_features(list(result_set), credentials, client)
        attach_features(result_set, features)

        # ========== 3단계: 오디오 분석 팬아웃 ==========
        targets = analysis_targets(features)
        batch = await fetch_analyses(
            targets, credentials, client, max_concurrency=max_concurrency
        )
        _merge_analyses(result_set, batch.successes)
    except Top100Error as e:
        logger.error(f"[TOP100] '{category}' 상위 100곡 수집 실패: {e}")
        raise

    # ========== 4단계: 1회 재시도 ==========
    if batch.failures:
        outcome = await retry_once(
            batch.failures, credentials, client,
            sleep=sleep, strategy=strategy, max_concurrency=max_concurrency,
        )
        _merge_analyses(result_set, outcome.analyses)

    with_analysis = sum(1 for r in result_set.values() if r.analysis is not None)
    logger.info(
        f"[TOP100] '{category}' 완료: {len(result_set)}곡, "
        f"피처 {len(features)}곡, 분석 {with_analysis}곡"
    )
    return result_set


async def collect_top100(
    category: str,
    config: Optional[Top100Config] = None,
    client: Optional[httpx.AsyncClient] = None,
    save: bool = True,
) -> Tuple[ResultSet, Optional[Path]]:
    """
    설정(환경 변수)의 인증 정보로 토큰 발급 → 수집 → (선택) JSON 저장.

    Returns:
        (ResultSet, 저장 경로 또는 None)
    """
    config = config or get_top100_config()
    if save:
        output_filename(category)
    owns_client = client is None
    client = client or create_client(config.HTTP_TIMEOUT)
    try:
        credentials = await authorize(
            config.SPOTIFY_CLIENT_ID, config.SPOTIFY_CLIENT_SECRET, client
        )
        result_set = await get_top100_audio_data(
            category, credentials, client,
            strategy=config.BACKOFF_STRATEGY,
            max_concurrency=config.MAX_CONCURRENCY,
        )
    finally:
        if owns_client:
            await client.aclose()

    path = save_result(category, result_set, config.OUTPUT_DIR) if save else None
    return result_set, path


async def collect_categories(
    categories: Iterable[str],
    credentials: Credentials,
    client: httpx.AsyncClient,
    stagger_seconds: float = 30,
    output_dir: Optional[str] = None,
    sleep: Sleep = asyncio.sleep,
    strategy: str = BACKOFF_FIRST,
    max_concurrency: Optional[int] = None,
) -> BatchOutcome:
    """
    여러 카테고리를 순서대로 수집한다.
    카테고리 사이에 stagger_seconds만큼 쉬어 rate limit을 피한다.
    오류로 중단된 카테고리는 로그만 남기고 failed에 기록한다.

    Raises:
        InvalidArgument: 알 수 없는 백오프 계산 방식 (요청 전에 거부)
    """
    validate_strategy(strategy)
    outcome = BatchOutcome()
    categories = list(categories)

    for i, category in enumerate(categories):
        if i > 0 and stagger_seconds > 0:
            await sleep(stagger_seconds)

        logger.info(f"[TOP100 Batch] [{i+1}/{len(categories)}] '{category}'")
        try:
            result_set = await get_top100_audio_data(
                category, credentials, client,
                sleep=sleep, strategy=strategy, max_concurrency=max_concurrency,
            )
            if output_dir is not None:
                save_result(category, result_set, output_dir)
        except Top100Error as e:
            logger.error(f"[TOP100 Batch] '{category}' 건너뜀: {e}")
            outcome.failed.append(category)
            continue

        outcome.results[category] = result_set

    logger.info(
        f"[TOP100 Batch] 완료: {len(outcome.results)}/{len(categories)} 카테고리 "
        f"(실패 {len(outcome.failed)})"
    )
    return outcome
