"""
테스트 공통 — httpx.MockTransport 기반 가짜 Spotify API
"""
import asyncio
from typing import Dict, List

import httpx
import pytest

from TOP100.auth import Credentials

API = "https://api.spotify.com/v1"
TRACKS_HREF = f"{API}/playlists/pl1/tracks?offset=0&limit=100"


class FakeSpotify:
    """
    가짜 Spotify 서버.

    analysis_script: {track_id: [(status, headers) | "network", ...]}
        요청마다 앞에서부터 하나씩 소비, 비면 200.
    """

    def __init__(self, n_tracks: int = 3):
        self.tracks = [
            {"id": f"track{i}", "name": f"Song {i}", "popularity": 50 + i}
            for i in range(n_tracks)
        ]
        self.requests: List[httpx.Request] = []
        self.analysis_script: Dict[str, list] = {}
        self.playlists_status = 200
        self.tracks_status = 200
        self.features_status = 200
        self.token_status = 200
        self.empty_category = False
        # {category: json dict | 문자열 본문} — 카테고리 응답을 그대로 바꿔치기
        self.category_bodies: Dict[str, object] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def paths(self, prefix: str) -> List[str]:
        return [r.url.path for r in self.requests if r.url.path.startswith(prefix)]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            return self._route(request)
        finally:
            self.in_flight -= 1

    def _route(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if request.url.host == "accounts.spotify.com":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            return httpx.Response(200, json={"access_token": "tok", "token_type": "Bearer"})

        if path.startswith("/v1/browse/categories/"):
            if self.playlists_status != 200:
                return httpx.Response(self.playlists_status)
            category = path.split("/")[4]
            if category in self.category_bodies:
                body = self.category_bodies[category]
                if isinstance(body, str):
                    return httpx.Response(200, text=body)
                return httpx.Response(200, json=body)
            items = [] if self.empty_category else [
                {"id": "pl1", "name": "Top Hits", "tracks": {"href": TRACKS_HREF}}
            ]
            return httpx.Response(200, json={"playlists": {"items": items}})

        if path == "/v1/playlists/pl1/tracks":
            if self.tracks_status != 200:
                return httpx.Response(self.tracks_status)
            return httpx.Response(
                200, json={"items": [{"track": t} for t in self.tracks]}
            )

        if path.startswith("/v1/playlists/") and path.endswith("/tracks"):
            return httpx.Response(200, json={"items": []})

        if path == "/v1/audio-features":
            if self.features_status != 200:
                return httpx.Response(self.features_status)
            ids = request.url.params["ids"].split(",")
            # 요청 순서와 반대로 응답
            features = [
                {"id": tid, "tempo": 100.0 + i, "energy": 0.5,
                 "analysis_url": f"{API}/audio-analysis/{tid}"}
                for i, tid in enumerate(ids)
            ]
            return httpx.Response(200, json={"audio_features": list(reversed(features))})

        if path.startswith("/v1/audio-analysis/"):
            track_id = path.split("/")[3]
            script = self.analysis_script.get(track_id) or []
            step = script.pop(0) if script else (200, {})
            if step == "network":
                raise httpx.ConnectError("connection reset", request=request)
            status, headers = step
            if status == 200:
                return httpx.Response(200, json={"track": {"id": track_id}, "segments": []})
            return httpx.Response(status, headers=headers)

        return httpx.Response(404)


class SleepRecorder:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake() -> FakeSpotify:
    return FakeSpotify()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(access_token="tok")


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()
