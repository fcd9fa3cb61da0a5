"""
Jitai 核心数据模型
==================
  SourceTag    — 数据源标识（决定 id 的含义以及缺省年代）
  QueryState   — 聚合器状态：IDLE → FETCHING → RESOLVING → SORTED
  GlyphRecord  — 各数据源统一映射后的字形记录

GlyphRecord 为不可变 dataclass；年代回填通过 `with_year` 生成新实例，
source_tag 因此在创建后无法被修改。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

# 年代未知的哨兵值，排序时落在最后
UNKNOWN_YEAR = 9999


class SourceTag(str, Enum):
    HDIC = "hdic"    # HDIC 字书数据库（新撰字镜 / 玉篇 / 篆隶万象名义）
    HNG = "hng"      # 汉字字体规范史数据库
    NIJL = "nijl"    # 国文学研究资料馆 字形检索
    UTHI = "uthi"    # 东京大学史料编纂所 古文书字形


class QueryState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RESOLVING = "resolving"
    SORTED = "sorted"


@dataclass(frozen=True)
class GlyphRecord:
    """一条档案命中记录。

    numeric_year 与 native_date_text 至多其一由适配器填写：
    能直接得到西历年份时填 numeric_year，否则保留原始和历文本，
    交给 HuTime 统一换算。
    """

    id: str                                  # 数据源内的标识，跨源不保证唯一
    source_tag: SourceTag
    book_name: str
    numeric_year: Optional[int] = None       # 前推格里历年份，可为负
    native_date_text: Optional[str] = None   # 原始历法表记，如 "天正6年"
    thumbnail_url: str = ""
    manifest_url: str = ""
    viewer_link: str = ""
    creator: str = ""
    rights: str = ""
    rights_url: str = ""

    @property
    def is_dated(self) -> bool:
        return self.numeric_year is not None

    def with_year(self, year: int) -> "GlyphRecord":
        return replace(self, numeric_year=year)
