"""NIJL 书目年代对照表

对照表由外层应用提供，格式与字形检索站点一致：
  [{"book_id": "200000001", "date": "1712年"}, ...]
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

from jitai.config import settings

_LEADING_INT = re.compile(r"^\s*(-?\d+)")


def load_book_table(path: str | Path) -> dict[str, str]:
    """读取 JSON 对照表，返回 book_id → 年代字符串。"""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    table = {str(row["book_id"]): str(row.get("date") or "") for row in raw}
    logger.info(f"[Books] loaded {len(table)} entries from {path}")
    return table


def table_from_settings() -> Mapping[str, str]:
    if not settings.nijl_book_table_path:
        logger.warning("[Books] NIJL_BOOK_TABLE_PATH 未配置，NIJL 命中将全部无法定年")
        return {}
    return load_book_table(settings.nijl_book_table_path)


def leading_year(text: str) -> Optional[int]:
    """取字符串开头的整数部分，如 "1712年" → 1712；没有数字时返回 None"""
    m = _LEADING_INT.match(text or "")
    return int(m.group(1)) if m else None
