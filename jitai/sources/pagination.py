"""
jitai/sources/pagination.py
===========================
按固定步长逐页请求，直到远端报告的结果数不再超过一页。

远端每页最多返回 page_size 条，并报告 search_results；
search_results > page_size - 1 时从 position + page_size 继续请求。
max_pages 限制总页数，防止远端持续报告大结果数导致无限翻页。
"""

from __future__ import annotations

from typing import Awaitable, Callable, Generic, Optional, Sequence, Tuple, TypeVar

from loguru import logger

T = TypeVar("T")

# (character, delegate, position) -> (reported_count, items)
PageFetcher = Callable[[str, bool, int], Awaitable[Tuple[Optional[int], Sequence[T]]]]


class PaginationWalker(Generic[T]):
    def __init__(
        self,
        fetch_page: PageFetcher,
        page_size: int = 100,
        max_pages: int = 50,
    ) -> None:
        self._fetch_page = fetch_page
        self.page_size = page_size
        self.max_pages = max_pages

    async def walk(self, character: str, delegate: bool, start_position: int = 1) -> list[T]:
        """按请求顺序拼接所有页的条目"""
        items: list[T] = []
        position = start_position
        for _ in range(self.max_pages):
            count, page_items = await self._fetch_page(character, delegate, position)
            items.extend(page_items)
            if (count or 0) <= self.page_size - 1:
                return items
            position += self.page_size

        logger.warning(
            f"[Pagination] {character}: stopped after {self.max_pages} pages "
            f"(position {position}), remote still reports more results"
        )
        return items
