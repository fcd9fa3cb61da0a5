"""各数据源适配器的映射测试（HTTP 由 FakeArchive 模拟）"""

from __future__ import annotations

import httpx
import pytest

from jitai.errors import LookupMiss, SourceUnavailable
from jitai.models import SourceTag
from jitai.sources import HdicAdapter, HngAdapter, NijlAdapter, UthiAdapter
from jitai.sources.schemas import NijlHit, UthiHit
from jitai.sources.uthi import normalize_date_text, viewer_link, zenkaku_digits

HDIC = "viewer.hdic.jp"
HNG = "search.hng-data.org"
NIJL = "lab.nijl.ac.jp"
UTHI = "clioapi.hi.u-tokyo.ac.jp"


def _nijl_hit(hit_id: str, bid: str) -> dict:
    return {
        "id": hit_id,
        "source": {"bid": bid, "title": "源氏物語"},
        "thumbnail_url": f"https://example.org/thumb/{hit_id}.jpg",
        "manifest_url": "https://example.org/manifest.json",
        "link": f"https://example.org/view/{hit_id}",
        "creator": "国文学研究資料館",
        "rights": "CC BY-SA 4.0",
        "rights_url": "https://creativecommons.org/licenses/by-sa/4.0/",
    }


def _uthi_hit(hit_id: str, date: str = "〔天正６年〕@ja") -> dict:
    return {
        "id": hit_id,
        "source": {"call_number": "貴-12-3@ja", "date": date, "value": "歴代亀鑑@ja", "page": 5},
        "thumbnail_url": "https://example.org/t.jpg",
        "manifest_url": "",
        "creator": "東京大学史料編纂所@ja",
        "rights": "",
        "rights_url": "",
    }


# ---------------------------------------------------------------------------
# HDIC
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_hdic_three_subqueries(archive):
    archive.add(HDIC, "/api/v1/tsj/imgurl", "https://viewer.hdic.jp/img/tsj/001.jpg")
    archive.add(HDIC, "/api/v1/syp/search", [{"SYID": "a025a074"}, {"SYID": "a025a075"}])
    archive.add(HDIC, "/api/v1/ktb/search", [{"TBID": "1_052_A13"}])

    async with archive.client() as client:
        records = await HdicAdapter(client).fetch("京")

    assert [r.numeric_year for r in records] == [898, 1013, 1013, 1114]
    assert all(r.source_tag is SourceTag.HDIC for r in records)
    assert records[0].thumbnail_url == "https://viewer.hdic.jp/img/tsj/001.jpg"
    assert records[1].thumbnail_url == "https://viewer.hdic.jp/img/syp/a025a074"
    assert records[3].thumbnail_url == "https://viewer.hdic.jp/img/ktb/1_052_A13.jpg"
    # 同一子库的命中 id 相同，两条都保留
    assert records[1].id == records[2].id == "HDIC_SYP_京"
    assert all(r.native_date_text is None for r in records)


@pytest.mark.asyncio
async def test_hdic_no_hits_yields_no_records(archive):
    archive.add(HDIC, "/api/v1/tsj/imgurl", text="")
    archive.add(HDIC, "/api/v1/syp/search", [])
    archive.add(HDIC, "/api/v1/ktb/search", None)

    async with archive.client() as client:
        records = await HdicAdapter(client).fetch("京")

    assert records == []


@pytest.mark.asyncio
async def test_hdic_empty_search_body_is_no_hits(archive):
    archive.add(HDIC, "/api/v1/tsj/imgurl", "https://viewer.hdic.jp/img/tsj/001.jpg")
    archive.add(HDIC, "/api/v1/syp/search", text="")
    archive.add(HDIC, "/api/v1/ktb/search", text="  ")

    async with archive.client() as client:
        records = await HdicAdapter(client).fetch("京")

    assert [r.numeric_year for r in records] == [898]


@pytest.mark.asyncio
async def test_hdic_search_sends_empty_definition(archive):
    archive.add(HDIC, "/api/v1/tsj/imgurl", text="https://viewer.hdic.jp/img/tsj/x.jpg")
    archive.add(HDIC, "/api/v1/syp/search", [])
    archive.add(HDIC, "/api/v1/ktb/search", [])

    async with archive.client() as client:
        records = await HdicAdapter(client).fetch("仏")

    assert len(records) == 1
    search = [r for r in archive.requests if r.url.path.endswith("/search")]
    assert search[0].url.params["entry"] == "仏"
    assert search[0].url.params["def"] == ""


@pytest.mark.asyncio
async def test_hdic_subquery_failure_fails_source(archive):
    archive.add(HDIC, "/api/v1/tsj/imgurl", "https://viewer.hdic.jp/img/tsj/001.jpg")
    archive.add(HDIC, "/api/v1/syp/search", {"error": "boom"}, status=500)

    async with archive.client() as client:
        with pytest.raises(SourceUnavailable):
            await HdicAdapter(client).fetch("京")


# ---------------------------------------------------------------------------
# HNG
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_hng_unwraps_singleton_matches(archive):
    payload = {
        "list": [
            [{
                "id": "hng-1",
                "source": {"name": "X", "date": "1200"},
                "thumbnail_url": "https://example.org/1.jpg",
                "manifest_url": "https://example.org/m.json",
                "link": "https://example.org/v/1",
                "creator": "HNG",
                "rights": "CC BY",
                "rights_url": "https://creativecommons.org/licenses/by/4.0/",
            }],
            [{"id": 2, "source": {"name": "Y", "date": 760}}],
        ]
    }
    archive.add(HNG, "/api/v2/search/character/京", payload)

    async with archive.client() as client:
        records = await HngAdapter(client).fetch("京")

    assert [r.id for r in records] == ["hng-1", "2"]
    assert [r.numeric_year for r in records] == [1200, 760]
    assert records[0].book_name == "X"
    assert records[0].viewer_link == "https://example.org/v/1"
    assert records[0].rights == "CC BY"


@pytest.mark.asyncio
async def test_hng_malformed_response_is_unavailable(archive):
    archive.add(HNG, "/api/v2/search/character/京", {"list": [[{"source": {}}]]})

    async with archive.client() as client:
        with pytest.raises(SourceUnavailable):
            await HngAdapter(client).fetch("京")


@pytest.mark.asyncio
async def test_hng_null_optional_fields_kept(archive):
    payload = {
        "list": [
            [{
                "id": "a",
                "source": {"name": None, "date": None},
                "thumbnail_url": None,
                "manifest_url": None,
                "link": None,
                "creator": None,
                "rights": None,
                "rights_url": None,
            }],
            [{"id": "b", "source": {"name": "Y", "date": 760}, "rights_url": "https://example.org/l"}],
        ]
    }
    archive.add(HNG, "/api/v2/search/character/京", payload)

    async with archive.client() as client:
        records = await HngAdapter(client).fetch("京")

    assert [r.id for r in records] == ["a", "b"]
    assert records[0].rights_url == ""
    assert records[0].book_name == ""
    assert records[0].numeric_year is None
    assert records[1].numeric_year == 760


@pytest.mark.asyncio
async def test_hng_non_numeric_date_left_unset(archive):
    archive.add(HNG, "/api/v2/search/character/京", {"list": [[{"id": "a", "source": {"date": "不明"}}]]})

    async with archive.client() as client:
        records = await HngAdapter(client).fetch("京")

    assert records[0].numeric_year is None
    assert records[0].native_date_text is None


# ---------------------------------------------------------------------------
# NIJL
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_nijl_dates_from_book_table(archive):
    archive.add(NIJL, "/jikei/api/char/search", {"list": [_nijl_hit("n1", "200001")]})

    async with archive.client() as client:
        records = await NijlAdapter(client, {"200001": "1712年"}).fetch("京", delegate=True)

    assert records[0].numeric_year == 1712
    assert records[0].native_date_text is None
    assert records[0].book_name == "源氏物語"
    params = archive.requests[0].url.params
    assert params["delegate"] == "true"
    assert params["limit"] == "-1"
    assert params["q"] == "京"


@pytest.mark.asyncio
async def test_nijl_null_attribution_kept(archive):
    hit = _nijl_hit("n1", "200001")
    hit.update(creator=None, rights=None, rights_url=None, link=None)
    hit["source"]["title"] = None
    archive.add(NIJL, "/jikei/api/char/search", {"list": [hit, _nijl_hit("n2", "200001")]})

    async with archive.client() as client:
        records = await NijlAdapter(client, {"200001": "1712年"}).fetch("京")

    assert [r.id for r in records] == ["n1", "n2"]
    assert records[0].creator == ""
    assert records[0].viewer_link == ""
    assert records[0].book_name == ""
    assert records[1].creator == "国文学研究資料館"


def test_uthi_null_source_fields():
    hit = UthiHit.model_validate({
        "id": "u1",
        "source": {"call_number": None, "date": None, "value": None, "page": None},
        "creator": None,
    })
    assert hit.source.date == ""
    assert hit.creator == ""


@pytest.mark.asyncio
async def test_nijl_lookup_miss_skips_only_that_hit(archive):
    # 粒度：单条命中。缺书目的命中被跳过，同批其余命中照常返回
    hits = [_nijl_hit("n1", "200001"), _nijl_hit("n2", "missing"), _nijl_hit("n3", "200002")]
    archive.add(NIJL, "/jikei/api/char/search", {"list": hits})
    table = {"200001": "1712年", "200002": "1450"}

    async with archive.client() as client:
        records = await NijlAdapter(client, table).fetch("京")

    assert [r.id for r in records] == ["n1", "n3"]
    assert [r.numeric_year for r in records] == [1712, 1450]


def test_nijl_build_record_raises_lookup_miss():
    adapter = NijlAdapter(client=None, book_table={})
    hit = NijlHit.model_validate(_nijl_hit("n2", "missing"))
    with pytest.raises(LookupMiss) as exc_info:
        adapter.build_record(hit)
    assert exc_info.value.book_id == "missing"


def test_nijl_era_without_digits_goes_to_resolver():
    adapter = NijlAdapter(client=None, book_table={"b": "寛永5年"})
    record = adapter.build_record(NijlHit.model_validate(_nijl_hit("n1", "b")))
    assert record.numeric_year is None
    assert record.native_date_text == "寛永5年"


# ---------------------------------------------------------------------------
# UTHI
# ---------------------------------------------------------------------------


def test_zenkaku_digits():
    assert zenkaku_digits("１５７８") == "1578"


def test_normalize_date_text_converts_then_strips():
    assert normalize_date_text("（C.E. １５７８）") == "C.E. 1578"
    assert normalize_date_text("〔天正６年〕@ja") == "天正6年"
    assert normalize_date_text(" (慶長3年) ") == "慶長3年"


def test_viewer_link_from_call_number():
    link = viewer_link("貴-12-3@ja", 5, "u1")
    assert link == (
        "https://clioimg.hi.u-tokyo.ac.jp/viewer/view/idata/000/"
        "_000ki_/12/3/5?ci=1&kts=2&dts=34&mts=u1"
    )


@pytest.mark.asyncio
async def test_uthi_maps_hits_without_numeric_year(archive):
    archive.add(UTHI, "/shipsapi/v1/W34/character/京", {"search_results": 1, "list": [_uthi_hit("u1")]})

    async with archive.client() as client:
        records = await UthiAdapter(client).fetch("京")

    r = records[0]
    assert r.numeric_year is None
    assert r.native_date_text == "天正6年"
    assert r.book_name == "歴代亀鑑"
    assert r.creator == "東京大学史料編纂所"
    assert r.viewer_link.endswith("/_000ki_/12/3/5?ci=1&kts=2&dts=34&mts=u1")
    params = archive.requests[0].url.params
    assert params["delegate"] == "0"
    assert params["position"] == "1"


@pytest.mark.asyncio
async def test_uthi_walks_all_pages(archive):
    pages = {
        "1": {"search_results": 150, "list": [_uthi_hit(f"a{i}") for i in range(100)]},
        "101": {"search_results": 50, "list": [_uthi_hit(f"b{i}") for i in range(50)]},
    }

    def handler(request):
        return httpx.Response(200, json=pages[request.url.params["position"]])

    archive.add(UTHI, "/shipsapi/v1/W34/character/京", handler=handler)

    async with archive.client() as client:
        records = await UthiAdapter(client).fetch("京", delegate=True)

    assert len(records) == 150
    assert records[0].id == "a0"
    assert records[-1].id == "b49"
    assert [r.url.params["position"] for r in archive.requests] == ["1", "101"]
    assert all(r.url.params["delegate"] == "1" for r in archive.requests)
