"""
各远程服务响应结构的 Pydantic 模型
==================================
只在适配器边界使用：响应先经这里校验，再映射为 GlyphRecord。
校验失败即视为数据源不可用（SourceUnavailable）。

  HdicSypHit / HdicKtbHit   — HDIC 检索命中
  HngMatch / HngResponse    — HNG 命中，外层包一层单元素数组（WrappedMatch）
  NijlHit / NijlResponse    — NIJL 字形检索命中
  UthiHit / UthiPage        — 史料编纂所分页结果
  HutimeResponse            — HuTime 历法转换 JSON-RPC 结果
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

# 可选的文本字段；档案返回 null 时按空串处理
_TEXT_FIELDS = (
    "name", "title", "value", "call_number", "date", "page",
    "thumbnail_url", "manifest_url", "link", "creator", "rights", "rights_url",
)


class _Wire(BaseModel):
    # 各档案的 id 有时是数字，有时是字符串
    model_config = ConfigDict(coerce_numbers_to_str=True, populate_by_name=True)

    @field_validator(*_TEXT_FIELDS, mode="before", check_fields=False)
    @classmethod
    def null_as_empty(cls, v):
        return "" if v is None else v


# ---------------------------------------------------------------------------
# HDIC
# ---------------------------------------------------------------------------


class HdicSypHit(_Wire):
    syid: str = Field(alias="SYID")


class HdicKtbHit(_Wire):
    tbid: str = Field(alias="TBID")


# 检索无结果时接口可能返回 null
class HdicSypResult(RootModel[Optional[List[HdicSypHit]]]):
    pass


class HdicKtbResult(RootModel[Optional[List[HdicKtbHit]]]):
    pass


# ---------------------------------------------------------------------------
# HNG
# ---------------------------------------------------------------------------


class HngSource(_Wire):
    name: str = ""
    date: Optional[Union[int, str]] = None


class HngMatch(_Wire):
    id: str
    source: HngSource = Field(default_factory=HngSource)
    thumbnail_url: str = ""
    manifest_url: str = ""
    link: str = ""
    creator: str = ""
    rights: str = ""
    rights_url: str = ""


# HNG 的每个命中都包在一个单元素数组里：[[match], [match], ...]
WrappedMatch = List[HngMatch]


class HngResponse(_Wire):
    matches: List[WrappedMatch] = Field(default_factory=list, alias="list")

    def unwrapped(self) -> list[HngMatch]:
        return [wrapped[0] for wrapped in self.matches if wrapped]


# ---------------------------------------------------------------------------
# NIJL
# ---------------------------------------------------------------------------


class NijlSource(_Wire):
    bid: str
    title: str = ""


class NijlHit(_Wire):
    id: str
    source: NijlSource
    thumbnail_url: str = ""
    manifest_url: str = ""
    link: str = ""
    creator: str = ""
    rights: str = ""
    rights_url: str = ""


class NijlResponse(_Wire):
    hits: List[NijlHit] = Field(default_factory=list, alias="list")


# ---------------------------------------------------------------------------
# UTHI（东京大学史料编纂所）
# ---------------------------------------------------------------------------


class UthiSource(_Wire):
    call_number: str = ""
    date: str = ""
    value: str = ""
    page: Union[int, str] = ""


class UthiHit(_Wire):
    id: str
    source: UthiSource = Field(default_factory=UthiSource)
    thumbnail_url: str = ""
    manifest_url: str = ""
    creator: str = ""
    rights: str = ""
    rights_url: str = ""


class UthiPage(_Wire):
    search_results: Optional[int] = None
    hits: List[UthiHit] = Field(default_factory=list, alias="list")


# ---------------------------------------------------------------------------
# HuTime
# ---------------------------------------------------------------------------


class HutimeItem(_Wire):
    text: Optional[str] = None


class HutimeResponse(_Wire):
    result: List[Optional[HutimeItem]] = Field(default_factory=list)
