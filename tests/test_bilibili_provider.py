import pytest
import requests
from conftest import FakeResponse, FakeSession
from video_context.errors import BilibiliAPIError
from video_context.providers.bilibili import DANMAKU_XML_API, PAGELIST_API, PLAYURL_API, VIEW_API, BilibiliProvider

BVID = "BV1Y8ZWBAEYh"
VIEW = {
    "code": 0,
    "data": {
        "bvid": BVID,
        "cid": 1234,
        "title": "潮汕英歌舞",
        "desc": "普宁英歌",
        "duration": 360,
        "owner": {"mid": 1, "name": "胶己人"},
    },
}


def test_extract_info_from_view():
    session = FakeSession({VIEW_API: FakeResponse(VIEW)})
    metadata = BilibiliProvider(session=session).extract_info(BVID)
    assert metadata.id == BVID
    assert metadata.cid == 1234
    assert metadata.title == "潮汕英歌舞"
    assert metadata.author == "胶己人"
    assert metadata.duration == 360
    assert metadata.description == "普宁英歌"
    assert session.calls == [(VIEW_API, {"bvid": BVID})]


def test_extract_info_uses_pagelist_when_view_has_no_cid():
    view = {"code": 0, "data": {"title": "t", "duration": "95"}}
    pages = {"code": 0, "data": [{"cid": 777, "page": 1}, {"cid": 778, "page": 2}]}
    session = FakeSession({VIEW_API: FakeResponse(view), PAGELIST_API: FakeResponse(pages)})
    metadata = BilibiliProvider(session=session).extract_info(BVID)
    assert metadata.cid == 777
    assert metadata.duration == 95
    assert metadata.author == ""


def test_view_api_error_code():
    session = FakeSession({VIEW_API: FakeResponse({"code": -404, "message": "啥都木有"})})
    with pytest.raises(BilibiliAPIError) as exc:
        BilibiliProvider(session=session).extract_info(BVID)
    assert exc.value.code == -404
    assert "啥都木有" in str(exc.value)


def test_view_http_error_propagates():
    session = FakeSession({VIEW_API: FakeResponse(status_code=500)})
    with pytest.raises(requests.HTTPError):
        BilibiliProvider(session=session).get_video_view(BVID)


def test_empty_pagelist_is_an_error():
    session = FakeSession({PAGELIST_API: FakeResponse({"code": 0, "data": []})})
    with pytest.raises(BilibiliAPIError):
        BilibiliProvider(session=session).get_pagelist(BVID)


def test_play_url_prefers_dash():
    data = {"code": 0, "data": {"dash": {"video": [{"base_url": "https://cdn/dash.m4s"}]}, "durl": [{"url": "https://cdn/durl.mp4"}]}}
    session = FakeSession({PLAYURL_API: FakeResponse(data)})
    assert BilibiliProvider(session=session).get_play_url(BVID, 1234) == "https://cdn/dash.m4s"
    params = session.calls[0][1]
    assert params["cid"] == "1234" and params["fnval"] == "16" and params["platform"] == "html5"


def test_play_url_durl_and_missing():
    durl = {"code": 0, "data": {"durl": [{"url": "https://cdn/durl.mp4"}]}}
    assert BilibiliProvider(session=FakeSession({PLAYURL_API: FakeResponse(durl)})).get_play_url(BVID, 1) == "https://cdn/durl.mp4"
    error = {"code": -400, "message": "请求错误"}
    assert BilibiliProvider(session=FakeSession({PLAYURL_API: FakeResponse(error)})).get_play_url(BVID, 1) is None
    empty = {"code": 0, "data": {}}
    assert BilibiliProvider(session=FakeSession({PLAYURL_API: FakeResponse(empty)})).get_play_url(BVID, 1) is None


def test_get_danmaku_parses_stream():
    xml = '<i><d p="1.5,1,25">路书</d><d p="x,1">bad</d><d p="3,1">左三右二</d></i>'
    response = FakeResponse(text=xml)
    session = FakeSession({f"{DANMAKU_XML_API}/1234.xml": response})
    entries = BilibiliProvider(session=session).get_danmaku(1234)
    assert [(e.second, e.text) for e in entries] == [(1.5, "路书"), (3.0, "左三右二")]
    assert response.encoding == "utf-8"
