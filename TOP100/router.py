"""
TOP100 Router — FastAPI 엔드포인트

엔드포인트:
- POST /api/top100/collect    : 카테고리 상위 100곡 수집 (+ JSON 저장)
- GET  /api/top100/categories : 알려진 카테고리 ID 목록
- GET  /api/top100/health     : 모듈 상태 확인
"""
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from .config import Top100Config, get_top100_config
from .constants import KNOWN_CATEGORIES
from .errors import AuthError, InvalidArgument, UpstreamError
from .pipeline import collect_top100
from .storage import result_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/top100", tags=["TOP100"])


# ==================== Request / Response Models ====================


class CollectRequest(BaseModel):
    """수집 요청"""
    category: str = Field(..., description="Spotify browse 카테고리 ID (예: jazz)")
    save: bool = Field(True, description="결과를 <output_dir>/<category>.json으로 저장")


class CollectResponse(BaseModel):
    """수집 결과"""
    success: bool
    category: str
    total: int
    with_features: int
    with_analysis: int
    output_path: Optional[str] = None
    tracks: Dict[str, dict] = Field(default_factory=dict)


# ==================== Endpoints ====================


@router.post("/collect", response_model=CollectResponse)
async def collect_category(
    request: CollectRequest,
    config: Top100Config = Depends(get_top100_config),
):
    """
    카테고리 상위 100곡 오디오 데이터 수집 API.

    요청 예시:
    ```json
    {"category": "caribbean", "save": true}
    ```
    """
    try:
        result_set, path = await collect_top100(
            request.category, config=config, save=request.save
        )
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(
            status_code=502,
            detail={"message": str(e), "status": e.status, "url": e.url, "reason": e.reason},
        )

    return CollectResponse(
        success=True,
        category=request.category,
        total=len(result_set),
        with_features=sum(1 for r in result_set.values() if r.features is not None),
        with_analysis=sum(1 for r in result_set.values() if r.analysis is not None),
        output_path=str(path) if path else None,
        tracks=result_to_dict(result_set),
    )


@router.get("/categories")
async def list_categories():
    """알려진 Spotify browse 카테고리 ID"""
    return {"categories": KNOWN_CATEGORIES, "total": len(KNOWN_CATEGORIES)}


@router.get("/health")
async def top100_health(config: Top100Config = Depends(get_top100_config)):
    """
    TOP100 모듈 상태 확인.

    - credentials: SPOTIFY_CLIENT_ID / SECRET 설정 여부
    """
    return {
        "status": "ready" if config.has_credentials else "partial",
        "components": {
            "credentials": config.has_credentials,
        },
        "output_dir": config.OUTPUT_DIR,
        "backoff_strategy": config.BACKOFF_STRATEGY,
        "max_concurrency": config.MAX_CONCURRENCY,
    }
