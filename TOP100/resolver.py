"""
Category Resolver — 카테고리 → 첫 번째 플레이리스트 → 트랙 목록

플레이리스트 트랙 URL은 응답의 tracks.href를 그대로 사용한다 (직접 조립하지 않음).
페이지네이션 없음: 첫 페이지(최대 100곡)만 사용.
"""
import logging
from typing import Dict, List
from urllib.parse import quote

import httpx

from .auth import Credentials
from .client import get_json
from .constants import CATEGORY_PLAYLISTS_URL, HTTP_OK, TOP_LIMIT
from .errors import InvalidArgument, UpstreamError
from .models import TrackRecord

logger = logging.getLogger(__name__)


def _validate_category(category) -> str:
    if not isinstance(category, str) or not category.strip():
        raise InvalidArgument("parameter `category` must be a non-empty string")
    if category.strip() in (".", ".."):
        raise InvalidArgument(f"invalid category {category!r}")
    return category.strip()


def _first_playlist(data: Dict, category: str, url: str) -> Dict:
    playlists = data.get("playlists") or {}
    items = playlists.get("items") if isinstance(playlists, dict) else None
    if items is not None and not isinstance(items, list):
        raise UpstreamError(HTTP_OK, url, reason="playlists.items is not a list")

    items = [p for p in items or [] if p]
    if not items:
        raise InvalidArgument(f"category '{category}' has no playlists")

    playlist = items[0]
    tracks = playlist.get("tracks") if isinstance(playlist, dict) else None
    href = tracks.get("href") if isinstance(tracks, dict) else None
    if not href or not isinstance(href, str):
        raise UpstreamError(HTTP_OK, url, reason="first playlist has no tracks.href")
    return playlist


def _to_record(track: Dict, url: str) -> TrackRecord:
    try:
        popularity = int(track.get("popularity") or 0)
    except (TypeError, ValueError) as e:
        raise UpstreamError(
            HTTP_OK, url, reason=f"invalid popularity for track {track['id']}"
        ) from e
    return TrackRecord(
        id=track["id"],
        name=track.get("name") or "",
        popularity=popularity,
    )


async def resolve_tracklist(
    category: str,
    credentials: Credentials,
    client: httpx.AsyncClient,
) -> List[TrackRecord]:
    """
    카테고리의 첫 번째 플레이리스트 트랙 목록을 가져온다.

    Returns:
        TrackRecord 리스트 (플레이리스트 순서, 최대 100곡, id 중복 제거)

    Raises:
        InvalidArgument: 빈 카테고리 / 플레이리스트 0개
        UpstreamError: 두 요청 중 하나라도 non-2xx 또는 형식이 맞지 않는 응답
    """
    category = _validate_category(category)

    # 카테고리는 경로 세그먼트 하나로만 들어간다 (/, ?, .. 이스케이프)
    playlists_url = CATEGORY_PLAYLISTS_URL.format(category=quote(category, safe=""))
    data = await get_json(client, playlists_url, credentials)

    playlist = _first_playlist(data, category, playlists_url)
    tracks_href = playlist["tracks"]["href"]
    logger.info(
        f"[Resolver] '{category}' → playlist '{playlist.get('name', playlist.get('id'))}'"
    )

    data = await get_json(client, tracks_href, credentials)
    items = data.get("items") or []
    if not isinstance(items, list):
        raise UpstreamError(HTTP_OK, tracks_href, reason="items is not a list")

    records: List[TrackRecord] = []
    seen = set()
    for item in items:
        track = item.get("track") if isinstance(item, dict) else None
        if not isinstance(track, dict) or not track.get("id"):
            continue
        if track["id"] in seen:
            continue
        seen.add(track["id"])
        records.append(_to_record(track, tracks_href))
        if len(records) >= TOP_LIMIT:
            break

    logger.info(f"[Resolver] '{category}' → {len(records)}곡")
    return records
