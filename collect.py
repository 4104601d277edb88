"""
카테고리 상위 100곡 수집 스크립트

사용법:
    python collect.py caribbean
    python collect.py country jazz metal --stagger 30 --output-dir data
    python collect.py --list
"""
import argparse
import asyncio
import logging
import sys

from TOP100.auth import authorize
from TOP100.client import create_client
from TOP100.config import get_top100_config
from TOP100.constants import KNOWN_CATEGORIES
from TOP100.errors import AuthError, InvalidArgument
from TOP100.pipeline import collect_categories

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def run(categories, config, output_dir: str, stagger: float) -> int:
    async with create_client(config.HTTP_TIMEOUT) as client:
        try:
            credentials = await authorize(
                config.SPOTIFY_CLIENT_ID, config.SPOTIFY_CLIENT_SECRET, client
            )
        except AuthError as e:
            logger.error(f"인증 실패: {e}")
            return 1

        outcome = await collect_categories(
            categories, credentials, client,
            stagger_seconds=stagger,
            output_dir=output_dir,
            strategy=config.BACKOFF_STRATEGY,
            max_concurrency=config.MAX_CONCURRENCY,
        )

    empty = [c for c, r in outcome.results.items() if not r]
    if empty:
        logger.info(f"트랙이 없는 카테고리: {', '.join(empty)}")
    if outcome.failed:
        logger.warning(f"수집 실패 카테고리: {', '.join(outcome.failed)}")
        return 1
    return 0


def main():
    try:
        config = get_top100_config()
    except InvalidArgument as e:
        logger.error(f"설정 오류: {e}")
        return 2

    parser = argparse.ArgumentParser(description="Spotify 카테고리 상위 100곡 오디오 데이터 수집")
    parser.add_argument(
        "categories",
        nargs="*",
        help="카테고리 ID (예: caribbean jazz)"
    )
    parser.add_argument(
        "--output-dir",
        default=config.OUTPUT_DIR,
        help=f"JSON 저장 위치 (기본: {config.OUTPUT_DIR})"
    )
    parser.add_argument(
        "--stagger",
        type=float,
        default=30,
        help="카테고리 사이 대기 시간(초) (기본: 30)"
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="알려진 카테고리 ID 출력"
    )

    args = parser.parse_args()

    if args.list:
        print("\n".join(KNOWN_CATEGORIES))
        return 0

    if not args.categories:
        parser.error("카테고리를 하나 이상 지정하세요")

    return asyncio.run(run(args.categories, config, args.output_dir, args.stagger))


if __name__ == "__main__":
    sys.exit(main())
