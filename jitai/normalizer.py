"""年代补全、排序与派生视图"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

from jitai.models import UNKNOWN_YEAR, GlyphRecord


def apply_resolved(records: Iterable[GlyphRecord], resolved: Mapping[str, int]) -> list[GlyphRecord]:
    """按原始文本精确匹配，把换算结果回填到尚未定年的记录"""
    out: list[GlyphRecord] = []
    for rec in records:
        if rec.numeric_year is None and rec.native_date_text in resolved:
            rec = rec.with_year(resolved[rec.native_date_text])
        out.append(rec)
    return out


def finalize(records: Iterable[GlyphRecord]) -> list[GlyphRecord]:
    """未定年的记录补 UNKNOWN_YEAR，再按年份升序稳定排序"""
    filled = [r if r.numeric_year is not None else r.with_year(UNKNOWN_YEAR) for r in records]
    return sorted(filled, key=lambda r: r.numeric_year)


def chart_labels(records: Iterable[GlyphRecord]) -> list[int]:
    """出现过的年份（去重、升序）；未知年代归入 UNKNOWN_YEAR"""
    return sorted({_year_of(r) for r in records})


def year_counts(records: Iterable[GlyphRecord]) -> dict[int, int]:
    counts = Counter(_year_of(r) for r in records)
    return {year: counts[year] for year in sorted(counts)}


def _year_of(rec: GlyphRecord) -> int:
    return rec.numeric_year if rec.numeric_year is not None else UNKNOWN_YEAR
