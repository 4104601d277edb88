"""
TOP100 데이터 모델

TrackRecord   : 결과 1곡 (id는 ResultSet의 키)
AnalysisTarget: 오디오 분석 요청 1건 — 발행 시점에 track_id와 URL을 묶어둔다
FailureRecord : 실패한 분석 요청 (재시도 창 동안만 존재, 저장하지 않음)
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from .constants import RATE_LIMITED


@dataclass
class TrackRecord:
    """
    카테고리 플레이리스트의 트랙 1곡.

    features: 오디오 피처 조회 성공 시 채워짐
    analysis: 오디오 분석(또는 재시도) 성공 시 채워짐
    """
    id: str
    name: str
    popularity: int
    features: Optional[Dict] = None
    analysis: Optional[Dict] = None

    def to_dict(self) -> Dict:
        data = {"name": self.name, "popularity": self.popularity}
        if self.features is not None:
            data["features"] = self.features
        if self.analysis is not None:
            data["analysis"] = self.analysis
        return data


# track id -> TrackRecord
ResultSet = Dict[str, TrackRecord]


@dataclass(frozen=True)
class AnalysisTarget:
    track_id: str
    url: str


@dataclass
class FailureRecord:
    """
    실패한 오디오 분석 요청.

    retry_after_seconds가 None이면 Retry-After 헤더가 없었거나 해석 불가.
    """
    http_status: int
    source_url: str
    retry_after_seconds: Optional[int] = None
    track_id: Optional[str] = None

    @property
    def is_rate_limited(self) -> bool:
        return self.http_status == RATE_LIMITED

    def target(self) -> Optional[AnalysisTarget]:
        track_id = self.track_id or track_id_from_url(self.source_url)
        if not track_id:
            return None
        return AnalysisTarget(track_id=track_id, url=self.source_url)


@dataclass
class AnalysisBatch:
    """오디오 분석 팬아웃 결과"""
    successes: Dict[str, Dict] = field(default_factory=dict)
    failures: List[FailureRecord] = field(default_factory=list)


@dataclass
class RetryOutcome:
    """1회 재시도 결과"""
    analyses: Dict[str, Dict] = field(default_factory=dict)
    residual_failures: int = 0
    delay: float = 0


def track_id_from_url(url: str) -> Optional[str]:
    """/v1/audio-analysis/{id} 형태의 요청 경로에서 4번째 세그먼트(id)를 꺼낸다."""
    parts = urlsplit(url).path.split("/")
    if len(parts) < 4 or not parts[3]:
        return None
    return parts[3]


@dataclass
class BatchOutcome:
    """
    여러 카테고리 수집 결과.

    results: 수집에 성공한 카테고리 → ResultSet (트랙 0곡이어도 성공)
    failed : 오류로 중단된 카테고리
    """
    results: Dict[str, ResultSet] = field(default_factory=dict)
    failed: List[str] = field(default_factory=list)
