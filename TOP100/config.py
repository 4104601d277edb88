"""
TOP100 Service Configuration - Spotify Client Credentials
"""
import os
from typing import Optional
from dotenv import load_dotenv

from .constants import BACKOFF_FIRST
from .retry import validate_strategy

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


class Top100Config:
    """TOP100 수집기 설정 (환경 변수 기반)"""

    def __init__(self):
        # Spotify API 인증 정보
        self.SPOTIFY_CLIENT_ID: str = os.getenv("SPOTIFY_CLIENT_ID", "")
        self.SPOTIFY_CLIENT_SECRET: str = os.getenv("SPOTIFY_CLIENT_SECRET", "")

        # 결과 JSON 저장 위치
        self.OUTPUT_DIR: str = os.getenv("TOP100_OUTPUT_DIR", "data")

        # HTTP 요청 타임아웃(초)
        self.HTTP_TIMEOUT: float = float(os.getenv("TOP100_HTTP_TIMEOUT", "30"))

        # 오디오 분석 동시 요청 상한 (미설정 = 무제한)
        self.MAX_CONCURRENCY: Optional[int] = _optional_int("TOP100_MAX_CONCURRENCY")

        # 429 백오프 계산 방식 ("first" | "max") — 잘못된 값은 로드 시점에 거부
        self.BACKOFF_STRATEGY: str = validate_strategy(
            os.getenv("TOP100_BACKOFF_STRATEGY", BACKOFF_FIRST).strip().lower()
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.SPOTIFY_CLIENT_ID and self.SPOTIFY_CLIENT_SECRET)


def get_top100_config() -> Top100Config:
    """TOP100 설정 인스턴스 반환"""
    return Top100Config()
