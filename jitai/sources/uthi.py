"""
jitai/sources/uthi.py
=====================
东京大学史料编纂所 古文书字形数据库（W34）适配器
接口：GET /shipsapi/v1/W34/character/{字}?delegate=<0|1>&position=<n>

结果分页（每页 100 条），由 PaginationWalker 取全。
年代为和历文本（如 "〔天正６年〕"），不直接给出西历年份：
  去掉 "@ja" 语言后缀 → 全角数字转半角 → 去掉括号类符号
之后统一交给 HuTime 换算，numeric_year 始终留空。

请求号（call_number）形如 "貴-12-3@ja"，拆成三段用于拼接阅览器链接。
"""

from __future__ import annotations

import re
from typing import Optional, Sequence, Tuple
from urllib.parse import quote

import httpx
from loguru import logger

from jitai.config import settings
from jitai.models import GlyphRecord, SourceTag
from jitai.sources.base import SourceAdapter
from jitai.sources.pagination import PaginationWalker
from jitai.sources.schemas import UthiHit, UthiPage

_LANG_SUFFIX = "@ja"
_BRACKETS = re.compile(r"[〔〕（）()]")
_FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")


class UthiAdapter(SourceAdapter):
    tag = SourceTag.UTHI

    def __init__(self, client: httpx.AsyncClient) -> None:
        super().__init__(client)
        self.walker: PaginationWalker[UthiHit] = PaginationWalker(
            self._fetch_page,
            page_size=settings.uthi_page_size,
            max_pages=settings.uthi_max_pages,
        )

    async def fetch(self, character: str, *, delegate: bool = False) -> list[GlyphRecord]:
        hits = await self.walker.walk(character, delegate, 1)
        logger.debug(f"[UTHI] {character}: {len(hits)} hits")
        return [self._to_record(hit) for hit in hits]

    async def _fetch_page(
        self, character: str, delegate: bool, position: int
    ) -> Tuple[Optional[int], Sequence[UthiHit]]:
        url = f"{settings.uthi_base_url}/shipsapi/v1/W34/character/{quote(character)}"
        params = {"delegate": "1" if delegate else "0", "position": str(position)}
        data = await self._get_json(url, params=params)
        page = self._parse(UthiPage, data)
        return page.search_results, page.hits

    def _to_record(self, hit: UthiHit) -> GlyphRecord:
        src = hit.source
        return GlyphRecord(
            id=hit.id,
            source_tag=self.tag,
            native_date_text=normalize_date_text(src.date) or None,
            book_name=_strip_lang(src.value),
            thumbnail_url=hit.thumbnail_url,
            manifest_url=hit.manifest_url,
            viewer_link=viewer_link(src.call_number, src.page, hit.id),
            creator=_strip_lang(hit.creator),
            rights=hit.rights,
            rights_url=hit.rights_url,
        )


# ---------------------------------------------------------------------------
# 辅助函数
# ---------------------------------------------------------------------------


def _strip_lang(text: str) -> str:
    return (text or "").replace(_LANG_SUFFIX, "")


def zenkaku_digits(text: str) -> str:
    """全角数字 → 半角数字，如 "１５７８" → "1578" """
    return text.translate(_FULLWIDTH_DIGITS)


def normalize_date_text(raw: str) -> str:
    """"〔天正６年〕@ja" → "天正6年"；先转半角再去括号"""
    text = _strip_lang(raw).strip()
    text = zenkaku_digits(text)
    return _BRACKETS.sub("", text)


def viewer_link(call_number: str, page, item_id: str) -> str:
    """由请求号拼出史料编纂所阅览器的深层链接。

    请求号不足三段时缺失的段留空，链接仍然生成。
    """
    parts = _strip_lang(call_number).split("-")
    parts += [""] * (3 - len(parts))
    num1, num2, num3 = parts[:3]
    num1 = num1.replace("貴", "_000ki_")
    return (
        f"{settings.uthi_viewer_base_url}/viewer/view/idata/000/"
        f"{num1}/{num2}/{num3}/{page}?ci=1&kts=2&dts=34&mts={item_id}"
    )
