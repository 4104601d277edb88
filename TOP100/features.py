"""
Feature Fetcher — 오디오 피처(High level) 일괄 조회

GET /v1/audio-features?ids=a,b,c  (1회 호출, 최대 100개)
응답 순서는 요청 순서와 다를 수 있으므로 피처 객체의 id로 매칭한다.
"""
import logging
from typing import Dict, List, Sequence

import httpx

from .auth import Credentials
from .client import get_json
from .constants import AUDIO_FEATURES_URL, HTTP_OK
from .errors import UpstreamError
from .models import AnalysisTarget, ResultSet

logger = logging.getLogger(__name__)


async def fetch_features(
    track_ids: Sequence[str],
    credentials: Credentials,
    client: httpx.AsyncClient,
) -> Dict[str, Dict]:
    """
    트랙 id 목록의 오디오 피처를 1회 요청으로 가져온다.

    Returns:
        {track_id: feature_dict} — 요청한 id에 해당하는 것만 포함

    Raises:
        UpstreamError: non-2xx 또는 형식이 맞지 않는 응답
    """
    ids = [tid for tid in track_ids if tid]
    if not ids:
        return {}

    data = await get_json(
        client, AUDIO_FEATURES_URL, credentials, params={"ids": ",".join(ids)}
    )

    items = data.get("audio_features") or []
    if not isinstance(items, list):
        raise UpstreamError(HTTP_OK, AUDIO_FEATURES_URL, reason="audio_features is not a list")

    requested = set(ids)
    features: Dict[str, Dict] = {}
    for item in items:
        if not isinstance(item, dict) or not item.get("id"):
            continue
        if item["id"] not in requested:
            logger.debug(f"[Features] 요청하지 않은 id 무시: {item['id']}")
            continue
        features[item["id"]] = item

    logger.info(f"[Features] {len(features)}/{len(ids)}곡 피처 획득")
    return features


def attach_features(result_set: ResultSet, features: Dict[str, Dict]) -> int:
    """피처를 같은 id의 TrackRecord에 붙인다. 붙인 개수 반환."""
    attached = 0
    for track_id, feature in features.items():
        record = result_set.get(track_id)
        if record is None:
            continue
        record.features = feature
        attached += 1
    return attached


def analysis_targets(features: Dict[str, Dict]) -> List[AnalysisTarget]:
    """피처 응답의 analysis_url로 트랙별 분석 요청 대상을 만든다."""
    return [
        AnalysisTarget(track_id=track_id, url=feature["analysis_url"])
        for track_id, feature in features.items()
        if isinstance(feature.get("analysis_url"), str) and feature["analysis_url"]
    ]
