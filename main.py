"""
Top-100 Audio Data API
Spotify 카테고리 상위 100곡 오디오 데이터 수집 서버

Modules:
- TOP100: 카테고리 → 플레이리스트 → 오디오 피처 + 오디오 분석 (1회 재시도)
"""
from fastapi import FastAPI
import logging

# 로거 설정
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn
import os

from TOP100.config import get_top100_config
from TOP100.router import router as top100_router

logger = logging.getLogger(__name__)


# ==================== Lifespan (시작/종료 이벤트) ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 시작/종료 시 실행"""
    logger.info("=" * 60)
    logger.info("[START] Top-100 Audio Data API")
    logger.info("=" * 60)

    config = get_top100_config()
    if config.has_credentials:
        logger.info("[OK] Spotify credentials configured")
    else:
        logger.warning("[WARN] SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET not set")
    logger.info(f"[OK] Output directory: {config.OUTPUT_DIR}")

    yield  # 앱 실행

    logger.info("[STOP] Top-100 Audio Data API")


# ==================== FastAPI 앱 초기화 ====================

app = FastAPI(
    title="Top-100 Audio Data API",
    description="""
## Spotify 카테고리 상위 100곡 오디오 데이터 수집

### 단계
- **Resolver**: 카테고리 → 첫 번째 플레이리스트 → 트랙 목록
- **Features**: 오디오 피처(High level) 일괄 조회
- **Analysis**: 트랙별 오디오 분석(Low level) 동시 조회 + 1회 재시도
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== TOP100 Router 등록 ====================

app.include_router(top100_router)


# ==================== Root Endpoints ====================

@app.get("/")
async def root():
    """API 상태 및 엔드포인트 목록"""
    return {
        "status": "running",
        "service": "Top-100 Audio Data API",
        "version": "1.0.0",
        "environment": os.getenv("ENVIRONMENT", "development"),
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "top100": {
                "collect": "/api/top100/collect",
                "categories": "/api/top100/categories",
                "health": "/api/top100/health"
            }
        }
    }


@app.get("/health")
async def health_check():
    """전체 시스템 헬스 체크"""
    config = get_top100_config()
    return {
        "status": "healthy",
        "api": True,
        "credentials": config.has_credentials
    }


# ==================== 서버 실행 ====================

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=os.getenv("ENVIRONMENT", "development") == "development"
    )
