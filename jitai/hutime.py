"""
HuTime 历法转换
===============
把和历年代文本批量换算为前推格里历年份。

一次查询只发一个请求：不重复的文本用换行拼接后作为 ival 提交，
结果按位置对应（第 N 条输入 ↔ 第 N 条输出）。
输出形如 "C.E. 1578"，去掉纪元前缀后取整数。

接口：POST https://ap.hutime.org/cal （JSON-RPC 2.0，method="conv"）
远端失败或某条无结果时，对应文本记为 UNKNOWN_YEAR，不向上抛异常。
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from jitai.config import settings
from jitai.models import UNKNOWN_YEAR
from jitai.sources.schemas import HutimeResponse

_ERA_PREFIX = "C.E. "
_INT = re.compile(r"^\s*(-?\d+)")


class DateResolver:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self.calls = 0

    async def resolve(self, native_date_texts: Iterable[str]) -> dict[str, int]:
        """返回 文本 → 年份；无法换算的记为 UNKNOWN_YEAR"""
        dates = list(dict.fromkeys(t for t in native_date_texts if t))
        if not dates:
            return {}

        self.calls += 1
        texts = await self._convert(dates)
        results: dict[str, int] = {}
        for index, date in enumerate(dates):
            text = texts[index] if index < len(texts) else None
            results[date] = parse_year(text)

        unresolved = sum(1 for y in results.values() if y == UNKNOWN_YEAR)
        logger.info(f"[HuTime] converted {len(dates)} dates, {unresolved} unresolved")
        return results

    async def _convert(self, dates: list[str]) -> list[Optional[str]]:
        body = {
            "jsonrpc": "2.0",
            "method": "conv",
            "params": {
                "ical": settings.hutime_input_calendar,
                "ocal": settings.hutime_output_calendar,
                "otype": "year",
                "ival": "\n".join(dates),
            },
        }
        try:
            resp = await self._client.post(settings.hutime_url, json=body)
            resp.raise_for_status()
            parsed = HutimeResponse.model_validate(resp.json())
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.warning(f"[HuTime] conversion failed for {len(dates)} dates: {exc}")
            return []
        return [item.text if item else None for item in parsed.result]


def parse_year(text: Optional[str]) -> int:
    """ "C.E. 1578" → 1578；空值或无法解析 → UNKNOWN_YEAR"""
    if not text:
        return UNKNOWN_YEAR
    m = _INT.match(text.replace(_ERA_PREFIX, ""))
    return int(m.group(1)) if m else UNKNOWN_YEAR
