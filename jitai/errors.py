"""聚合流水线的异常类型。

SourceUnavailable 由适配器抛出、聚合器捕获；LookupMiss 只影响单条记录。
年代无法换算不抛异常，直接记为 UNKNOWN_YEAR。
"""

from __future__ import annotations


class JitaiError(Exception):
    pass


class SourceUnavailable(JitaiError):
    """数据源请求失败或返回结构无法解析"""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class LookupMiss(JitaiError):
    """书目 ID 不在静态对照表中"""

    def __init__(self, book_id: str) -> None:
        super().__init__(f"book id not found in table: {book_id!r}")
        self.book_id = book_id
