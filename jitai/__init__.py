"""
jitai
=====
多档案字形年代聚合：对一个汉字并发检索多个字形数据库，
统一换算年代后按时间顺序排列。
"""
from jitai.aggregator import GlyphAggregator, fetch_glyphs
from jitai.errors import LookupMiss, SourceUnavailable
from jitai.hutime import DateResolver
from jitai.models import UNKNOWN_YEAR, GlyphRecord, QueryState, SourceTag

__all__ = [
    "GlyphAggregator",
    "fetch_glyphs",
    "DateResolver",
    "GlyphRecord",
    "QueryState",
    "SourceTag",
    "UNKNOWN_YEAR",
    "LookupMiss",
    "SourceUnavailable",
]
