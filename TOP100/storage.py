"""
결과 저장 — 카테고리별 JSON 파일 (<output_dir>/<category>.json)
"""
import json
import logging
from pathlib import Path
from typing import Dict, Union

from .errors import InvalidArgument
from .models import ResultSet

logger = logging.getLogger(__name__)


def result_to_dict(result_set: ResultSet) -> Dict[str, Dict]:
    """ResultSet → {track_id: {name, popularity, features?, analysis?}}"""
    return {track_id: record.to_dict() for track_id, record in result_set.items()}


def output_filename(category: str) -> str:
    """카테고리 → 파일 이름. 경로 구분자는 제거하고 마지막 이름만 사용한다."""
    name = Path(str(category).replace("\\", "/")).name.strip()
    if name in ("", ".", ".."):
        raise InvalidArgument(f"cannot derive an output file name from category {category!r}")
    return f"{name}.json"


def save_result(
    category: str,
    result_set: ResultSet,
    output_dir: Union[str, Path] = "data",
) -> Path:
    path = Path(output_dir) / output_filename(category)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(result_to_dict(result_set), f, indent=4, ensure_ascii=False)

    logger.info(f"[Storage] '{category}' → {path} ({len(result_set)}곡)")
    return path
