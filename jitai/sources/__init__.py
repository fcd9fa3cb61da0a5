"""
jitai/sources
=============
数据源适配层：把各档案的异构响应映射为统一的 GlyphRecord。

支持数据源：
  hdic   HDIC 字书数据库（固定年代，三个子库）
  hng    汉字字体规范史数据库（直接给出西历年份）
  nijl   国文学研究资料馆 字形检索（书目对照表定年）
  uthi   东京大学史料编纂所 古文书（分页，和历文本交给 HuTime）
"""
from __future__ import annotations

from typing import Mapping, Optional

import httpx

from jitai.models import SourceTag
from jitai.sources.base import SourceAdapter
from jitai.sources.hdic import HdicAdapter
from jitai.sources.hng import HngAdapter
from jitai.sources.nijl import NijlAdapter
from jitai.sources.uthi import UthiAdapter


def build_adapters(
    client: httpx.AsyncClient,
    book_table: Optional[Mapping[str, str]] = None,
) -> dict[SourceTag, SourceAdapter]:
    """按固定顺序构造全部适配器；book_table 缺省时从配置路径读取"""
    if book_table is None:
        from jitai.books import table_from_settings

        book_table = table_from_settings()
    return {
        SourceTag.HDIC: HdicAdapter(client),
        SourceTag.HNG: HngAdapter(client),
        SourceTag.NIJL: NijlAdapter(client, book_table),
        SourceTag.UTHI: UthiAdapter(client),
    }


__all__ = [
    "SourceAdapter",
    "HdicAdapter",
    "HngAdapter",
    "NijlAdapter",
    "UthiAdapter",
    "build_adapters",
]
