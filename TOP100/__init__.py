"""
TOP100 - Category Top-100 Audio Data Collector

Spotify 브라우즈 카테고리의 첫 번째 플레이리스트에서 상위 100곡을 가져와
오디오 피처(High level)와 오디오 분석(Low level)을 붙여 JSON으로 저장한다.

단계:
1. 토큰 발급 (client credentials)
2. 카테고리 → 플레이리스트 → 트랙 목록
3. 오디오 피처 일괄 조회 (1회 호출)
4. 트랙별 오디오 분석 동시 조회
5. 실패분 1회 재시도 (429 Retry-After 기반 대기)

사용법:
    from TOP100 import authorize, get_top100_audio_data
    credentials = await authorize(client_id, client_secret, client)
    result = await get_top100_audio_data("jazz", credentials, client)
"""
from .auth import Credentials, authorize
from .errors import Top100Error, InvalidArgument, AuthError, UpstreamError
from .models import TrackRecord, FailureRecord, AnalysisTarget, BatchOutcome
from .pipeline import get_top100_audio_data, collect_categories
from .storage import save_result, result_to_dict
