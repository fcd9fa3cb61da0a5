"""
jitai/sources/hng.py
====================
HNG（漢字字体規範史データベース）适配器
接口：GET /api/v2/search/character/{字}

响应 {"list": [[match], [match], ...]}，每个命中外包一层单元素数组，
在这里拆开后再映射；source.date 已是西历年份。
"""

from __future__ import annotations

from typing import Optional, Union
from urllib.parse import quote

from loguru import logger

from jitai.config import settings
from jitai.models import GlyphRecord, SourceTag
from jitai.sources.base import SourceAdapter
from jitai.sources.schemas import HngMatch, HngResponse


class HngAdapter(SourceAdapter):
    tag = SourceTag.HNG

    async def fetch(self, character: str, *, delegate: bool = False) -> list[GlyphRecord]:
        url = f"{settings.hng_base_url}/api/v2/search/character/{quote(character)}"
        data = await self._get_json(url)
        matches = self._parse(HngResponse, data).unwrapped()
        logger.debug(f"[HNG] {character}: {len(matches)} matches")
        return [self._to_record(m) for m in matches]

    def _to_record(self, match: HngMatch) -> GlyphRecord:
        return GlyphRecord(
            id=match.id,
            source_tag=self.tag,
            numeric_year=_to_year(match.source.date),
            book_name=match.source.name,
            thumbnail_url=match.thumbnail_url,
            manifest_url=match.manifest_url,
            viewer_link=match.link,
            creator=match.creator,
            rights=match.rights,
            rights_url=match.rights_url,
        )


def _to_year(raw: Optional[Union[int, str]]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        # 非数字年代留空，最终按未知处理
        return None
