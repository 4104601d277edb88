"""
TOP100 예외 정의

- InvalidArgument : 카테고리 입력 오류 / 플레이리스트 없음 (재시도 안 함)
- AuthError       : 토큰 발급 실패 (파이프라인 중단)
- UpstreamError   : 목록/트랙/피처 단계의 non-2xx 또는 해석 불가 응답 (파이프라인 중단)

오디오 분석 단계의 실패는 예외가 아니라 FailureRecord로 수집된다.
"""
from typing import Optional


class Top100Error(Exception):
    pass


class InvalidArgument(Top100Error):
    pass


class AuthError(Top100Error):
    pass


class UpstreamError(Top100Error):
    """Blocking stage returned a non-2xx or unusable response."""
    def __init__(self, status: int, url: str, reason: Optional[str] = None):
        self.status = status
        self.url = url
        self.reason = reason
        message = f"Upstream request failed: HTTP {status} ({url})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
