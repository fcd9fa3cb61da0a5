"""
jitai/sources/hdic.py
=====================
HDIC（Hanzi Database for Integrated Classics）适配器
站点：https://viewer.hdic.jp

三个子查询，年代为各书的固定成书年份，不取自响应：
  TSJ  天治本新撰字镜       898   /api/v1/tsj/imgurl  → 单个图片 URL
  SYP  宋本玉篇            1013   /api/v1/syp/search  → 命中列表（SYID）
  KTB  高山寺本篆隶万象名义  1114   /api/v1/ktb/search  → 命中列表（TBID）

id 为 "HDIC_<子库>_<字>"；同一子库的多条命中 id 相同，下游不以 id 去重。
"""

from __future__ import annotations

from loguru import logger

from jitai.config import settings
from jitai.errors import SourceUnavailable
from jitai.models import GlyphRecord, SourceTag
from jitai.sources.base import SourceAdapter
from jitai.sources.schemas import HdicKtbResult, HdicSypResult

TSJ_YEAR = 898
SYP_YEAR = 1013
KTB_YEAR = 1114

TSJ_BOOK = "天治本新撰字鏡"
SYP_BOOK = "宋本玉篇"
KTB_BOOK = "高山寺本篆隷万象名義"


class HdicAdapter(SourceAdapter):
    tag = SourceTag.HDIC

    async def fetch(self, character: str, *, delegate: bool = False) -> list[GlyphRecord]:
        # 依次请求；任一子查询失败即整个数据源失败
        tsj = await self._fetch_tsj(character)
        syp = await self._fetch_syp(character)
        ktb = await self._fetch_ktb(character)
        records = tsj + syp + ktb
        logger.debug(f"[HDIC] {character}: tsj={len(tsj)} syp={len(syp)} ktb={len(ktb)}")
        return records

    async def _fetch_tsj(self, character: str) -> list[GlyphRecord]:
        url = f"{settings.hdic_base_url}/api/v1/tsj/imgurl"
        resp = await self._get(url, params={"entry": character})
        img_url = _image_url_from(resp)
        if not img_url:
            return []
        return [
            GlyphRecord(
                id=f"HDIC_TSJ_{character}",
                source_tag=self.tag,
                numeric_year=TSJ_YEAR,
                book_name=TSJ_BOOK,
                thumbnail_url=img_url,
            )
        ]

    async def _fetch_syp(self, character: str) -> list[GlyphRecord]:
        url = f"{settings.hdic_base_url}/api/v1/syp/search"
        data = await self._search(url, character)
        hits = self._parse(HdicSypResult, data).root or []
        return [
            GlyphRecord(
                id=f"HDIC_SYP_{character}",
                source_tag=self.tag,
                numeric_year=SYP_YEAR,
                book_name=SYP_BOOK,
                thumbnail_url=f"{settings.hdic_base_url}/img/syp/{hit.syid}",
            )
            for hit in hits
        ]

    async def _fetch_ktb(self, character: str) -> list[GlyphRecord]:
        url = f"{settings.hdic_base_url}/api/v1/ktb/search"
        data = await self._search(url, character)
        hits = self._parse(HdicKtbResult, data).root or []
        return [
            GlyphRecord(
                id=f"HDIC_KTB_{character}",
                source_tag=self.tag,
                numeric_year=KTB_YEAR,
                book_name=KTB_BOOK,
                thumbnail_url=f"{settings.hdic_base_url}/img/ktb/{hit.tbid}.jpg",
            )
            for hit in hits
        ]

    async def _search(self, url: str, character: str):
        # 无命中时接口可能返回空响应体，等同于 null
        resp = await self._get(url, params={"entry": character, "def": ""})
        if not resp.content.strip():
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise SourceUnavailable(self.tag.value, f"invalid JSON from {url}") from exc


def _image_url_from(resp) -> str:
    """imgurl 接口有时返回 JSON 字符串，有时返回纯文本"""
    try:
        value = resp.json()
    except ValueError:
        value = resp.text
    if not isinstance(value, str):
        return ""
    return value.strip()
