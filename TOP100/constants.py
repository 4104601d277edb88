"""
TOP100 Constants — Spotify 엔드포인트, 재시도 파라미터, 카테고리 목록
"""

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE = "https://api.spotify.com/v1"

CATEGORY_PLAYLISTS_URL = API_BASE + "/browse/categories/{category}/playlists"
AUDIO_FEATURES_URL = API_BASE + "/audio-features"

# 플레이리스트 1페이지 = 최대 100곡
TOP_LIMIT = 100

# 429 Retry-After 값에 더하는 여유 시간(초)
RETRY_PADDING_SECONDS = 2

HTTP_OK = 200
RATE_LIMITED = 429
RETRY_AFTER_HEADER = "Retry-After"

# 네트워크 오류로 응답 자체가 없을 때의 상태 코드
NO_RESPONSE_STATUS = 0

# 백오프 계산 방식: 첫 번째 429 기준 / 모든 429 중 최대값
BACKOFF_FIRST = "first"
BACKOFF_MAX = "max"

# Spotify browse 카테고리 ID (검증용이 아닌 안내용)
KNOWN_CATEGORIES = [
    "toplists", "hiphop", "pop",
    "country", "workout", "rock",
    "latin", "holidays", "mood",
    "rnb", "gaming", "shows_with_music",
    "focus", "edm_dance", "blackhistorymonth",
    "chill", "at_home", "indie_alt",
    "inspirational", "decades", "instrumental",
    "alternative", "wellness", "in_the_car",
    "pride", "party", "sleep",
    "classical", "jazz", "roots",
    "soul", "sessions", "dinner",
    "romance", "kpop", "punk",
    "regional_mexican", "popculture", "blues",
    "arab", "desi", "radar",
    "anime", "thirdparty", "afro",
    "comedy", "metal", "caribbean",
    "sports", "funk",
]
