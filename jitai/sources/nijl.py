"""
jitai/sources/nijl.py
=====================
国文学研究资料馆（NIJL）字形检索适配器
接口：GET /jikei/api/char/search?delegate=<true|false>&limit=-1&q=<字>

命中只带书目 ID（source.bid），年代需查静态书目对照表：
  对照表中的年代以西历年份开头（如 "1712年"）→ 取开头数字作为 numeric_year
  不以数字开头 → 原文交给 HuTime 换算
  书目 ID 不在表中 → 该条命中抛 LookupMiss 并被跳过，其余命中照常返回
"""

from __future__ import annotations

from typing import Mapping

import httpx
from loguru import logger

from jitai.books import leading_year
from jitai.config import settings
from jitai.errors import LookupMiss
from jitai.models import GlyphRecord, SourceTag
from jitai.sources.base import SourceAdapter
from jitai.sources.schemas import NijlHit, NijlResponse


class NijlAdapter(SourceAdapter):
    tag = SourceTag.NIJL

    def __init__(self, client: httpx.AsyncClient, book_table: Mapping[str, str]) -> None:
        super().__init__(client)
        self._books = book_table

    async def fetch(self, character: str, *, delegate: bool = False) -> list[GlyphRecord]:
        url = f"{settings.nijl_base_url}/jikei/api/char/search"
        params = {
            "delegate": "true" if delegate else "false",
            "limit": -1,
            "q": character,
        }
        data = await self._get_json(url, params=params)
        hits = self._parse(NijlResponse, data).hits

        records: list[GlyphRecord] = []
        for hit in hits:
            try:
                records.append(self.build_record(hit))
            except LookupMiss as exc:
                logger.warning(f"[NIJL] skip hit {hit.id}: {exc}")
        logger.debug(f"[NIJL] {character}: {len(records)}/{len(hits)} hits mapped")
        return records

    def build_record(self, hit: NijlHit) -> GlyphRecord:
        """单条命中 → GlyphRecord；书目不在对照表中时抛 LookupMiss"""
        try:
            era = self._books[hit.source.bid]
        except KeyError:
            raise LookupMiss(hit.source.bid) from None

        year = leading_year(era)
        return GlyphRecord(
            id=hit.id,
            source_tag=self.tag,
            numeric_year=year,
            native_date_text=(era.strip() or None) if year is None else None,
            book_name=hit.source.title,
            thumbnail_url=hit.thumbnail_url,
            manifest_url=hit.manifest_url,
            viewer_link=hit.link,
            creator=hit.creator,
            rights=hit.rights,
            rights_url=hit.rights_url,
        )
