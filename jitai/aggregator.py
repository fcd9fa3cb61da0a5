"""
字形聚合器
==========
对单个字符并发查询所有启用的数据源，合并结果、统一定年并按年份排序。

状态机：
  IDLE → FETCHING   新查询开始，清空上一轮的全部状态
  FETCHING          并发调用各适配器，等待全部结束（失败的数据源贡献 0 条）
  → RESOLVING       收集尚未定年记录的和历文本，调用一次 HuTime 批量换算
  → SORTED          未定年记录补 UNKNOWN_YEAR，稳定排序，重算派生视图

每次查询分配递增的 generation；查询进行中若有新查询开始，
旧查询的结果在写回前被丢弃。
"""

from __future__ import annotations

import asyncio
from typing import Iterable, Mapping, Optional

import httpx
from loguru import logger

from jitai import normalizer
from jitai.config import settings
from jitai.errors import SourceUnavailable
from jitai.hutime import DateResolver
from jitai.models import GlyphRecord, QueryState, SourceTag
from jitai.sources import build_adapters
from jitai.sources.base import SourceAdapter


class GlyphAggregator:
    def __init__(
        self,
        adapters: Mapping[SourceTag, SourceAdapter],
        resolver: DateResolver,
    ) -> None:
        self.adapters = dict(adapters)
        self.resolver = resolver
        self.state = QueryState.IDLE
        self._generation = 0
        self._reset()

    @classmethod
    def from_client(
        cls, client: httpx.AsyncClient, book_table: Optional[Mapping[str, str]] = None
    ) -> "GlyphAggregator":
        return cls(build_adapters(client, book_table), DateResolver(client))

    def _reset(self) -> None:
        self.character: Optional[str] = None
        self.records: list[GlyphRecord] = []
        self.sorted_records: list[GlyphRecord] = []
        self.chart_labels: list[int] = []
        self.year_counts: dict[int, int] = {}
        self.native_dates: list[str] = []
        self.errors: dict[SourceTag, BaseException] = {}

    @property
    def pending(self) -> bool:
        """查询是否进行中（FETCHING 或 RESOLVING）"""
        return self.state in (QueryState.FETCHING, QueryState.RESOLVING)

    @property
    def generation(self) -> int:
        return self._generation

    async def fetch_all(
        self,
        character: str,
        *,
        enabled: Optional[Iterable[SourceTag]] = None,
        delegate: Optional[bool] = None,
    ) -> list[GlyphRecord]:
        """执行一轮完整查询，返回按年份升序排列的记录。

        enabled / delegate 缺省时取自 settings。
        若本轮查询被更新的查询取代，返回空列表且不改动聚合器状态。
        """
        self._generation += 1
        generation = self._generation
        self._reset()
        self.character = character

        enabled_tags = set(settings.enabled_sources if enabled is None else enabled)
        delegate = settings.search_delegate if delegate is None else delegate
        tags = [tag for tag in self.adapters if tag in enabled_tags]

        if not tags:
            logger.info(f"[Aggregator] {character}: no sources enabled")
            self.state = QueryState.SORTED
            return []

        self.state = QueryState.FETCHING
        try:
            records, errors = await self._fan_out(character, tags, delegate)
            if self._is_stale(generation, character):
                return []
            self.errors = errors

            self.state = QueryState.RESOLVING
            records = await self._resolve_dates(records)
            if self._is_stale(generation, character):
                return []

            self.records = records
            self.sorted_records = normalizer.finalize(records)
            self.chart_labels = normalizer.chart_labels(self.sorted_records)
            self.year_counts = normalizer.year_counts(self.sorted_records)
            self.state = QueryState.SORTED
            logger.info(
                f"[Aggregator] {character}: {len(self.sorted_records)} records, "
                f"{len(self.errors)} sources failed"
            )
            return self.sorted_records
        finally:
            if generation == self._generation and self.pending:
                # 被取消或意外中断时清除进行中标志
                self.state = QueryState.IDLE

    async def _fan_out(
        self, character: str, tags: list[SourceTag], delegate: bool
    ) -> tuple[list[GlyphRecord], dict[SourceTag, BaseException]]:
        results = await asyncio.gather(
            *(self.adapters[tag].fetch(character, delegate=delegate) for tag in tags),
            return_exceptions=True,
        )

        # 各适配器返回独立列表，全部结束后再按适配器顺序拼接
        records: list[GlyphRecord] = []
        errors: dict[SourceTag, BaseException] = {}
        for tag, result in zip(tags, results):
            if isinstance(result, SourceUnavailable):
                logger.warning(f"[Aggregator] {tag.value} unavailable: {result.reason}")
                errors[tag] = result
            elif isinstance(result, Exception):
                logger.opt(exception=result).error(f"[Aggregator] {tag.value} unexpected error: {result}")
                errors[tag] = result
            elif isinstance(result, BaseException):
                raise result
            else:
                logger.info(f"[Aggregator] {tag.value}: {len(result)} records")
                records.extend(result)
        return records, errors

    async def _resolve_dates(self, records: list[GlyphRecord]) -> list[GlyphRecord]:
        pending_texts = [
            r.native_date_text for r in records
            if r.numeric_year is None and r.native_date_text
        ]
        self.native_dates = list(dict.fromkeys(pending_texts))
        if not self.native_dates:
            return records
        resolved = await self.resolver.resolve(self.native_dates)
        return normalizer.apply_resolved(records, resolved)

    def _is_stale(self, generation: int, character: str) -> bool:
        if generation == self._generation:
            return False
        logger.info(
            f"[Aggregator] discard stale results for {character!r} "
            f"(generation {generation}, current {self._generation})"
        )
        return True


async def fetch_glyphs(
    character: str,
    *,
    enabled: Optional[Iterable[SourceTag]] = None,
    delegate: Optional[bool] = None,
    book_table: Optional[Mapping[str, str]] = None,
) -> list[GlyphRecord]:
    """一次性查询入口：自建 HTTP 客户端，查询结束即关闭。"""
    async with httpx.AsyncClient(
        timeout=settings.http_timeout,
        headers={"User-Agent": settings.user_agent},
    ) as client:
        aggregator = GlyphAggregator.from_client(client, book_table)
        return await aggregator.fetch_all(character, enabled=enabled, delegate=delegate)
