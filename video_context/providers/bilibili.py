import math
import requests
from typing import Any, Dict, List, Optional
from video_context.config import Settings, settings
from video_context.core.video import VideoSource
from video_context.errors import BilibiliAPIError
from video_context.models.danmaku import CommentEntry
from video_context.models.video import VideoMetadata
from video_context.utils.danmaku import parse_danmaku_xml
from video_context.utils.logger import logger
from video_context.utils.retry import api_retry

VIEW_API = "https://api.bilibili.com/x/web-interface/view"
PAGELIST_API = "https://api.bilibili.com/x/player/pagelist"
PLAYURL_API = "https://api.bilibili.com/x/player/playurl"
DANMAKU_XML_API = "https://comment.bilibili.com"

def _to_duration(value) -> float:
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0

class BilibiliProvider(VideoSource):
    def __init__(self, session: Optional[requests.Session] = None, config: Settings = None):
        self.config = config or settings
        self.session = session or requests.Session()
        self.headers = {'User-Agent': self.config.BILIBILI_USER_AGENT}

    @api_retry()
    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        resp = self.session.get(url, params=params, headers=self.headers, timeout=self.config.REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp

    def get_video_view(self, bvid: str) -> Dict[str, Any]:
        data = self._get(VIEW_API, {'bvid': bvid}).json()
        if data.get('code') != 0 or not data.get('data'):
            raise BilibiliAPIError(f"Bilibili view API error: {data.get('message') or data.get('code')}", code=data.get('code'))
        return data['data']

    def get_pagelist(self, bvid: str) -> List[Dict[str, Any]]:
        data = self._get(PAGELIST_API, {'bvid': bvid}).json()
        pages = data.get('data')
        if data.get('code') != 0 or not isinstance(pages, list) or not pages:
            raise BilibiliAPIError(f"Bilibili pagelist API error: {data.get('message') or data.get('code')}", code=data.get('code'))
        return pages

    def get_play_url(self, bvid: str, cid: int) -> Optional[str]:
        params = {
            'bvid': bvid,
            'cid': str(cid),
            'qn': '64',
            'fnver': '0',
            'fnval': '16',
            'fourk': '1',
            'platform': 'html5',
        }
        data = self._get(PLAYURL_API, params).json()
        if data.get('code') != 0 or not data.get('data'):
            return None
        pdata = data['data']
        # 优先 DASH 视频流，其次 durl
        dash_video = ((pdata.get('dash') or {}).get('video') or [{}])[0]
        durl = (pdata.get('durl') or [{}])[0]
        return dash_video.get('baseUrl') or dash_video.get('base_url') or durl.get('url') or None

    def get_comment_stream(self, cid: int) -> str:
        resp = self._get(f"{DANMAKU_XML_API}/{cid}.xml")
        # comment.bilibili.com does not always declare a charset
        resp.encoding = 'utf-8'
        return resp.text

    def get_danmaku(self, cid: int) -> List[CommentEntry]:
        entries = parse_danmaku_xml(self.get_comment_stream(cid))
        logger.info(f"Parsed {len(entries)} danmaku for cid {cid}")
        return entries

    def extract_info(self, bvid: str) -> VideoMetadata:
        view = self.get_video_view(bvid)
        cid = view.get('cid')
        if not cid:
            cid = self.get_pagelist(bvid)[0].get('cid')
        return VideoMetadata(
            id=bvid,
            cid=cid or None,
            title=view.get('title') or '',
            author=(view.get('owner') or {}).get('name') or '',
            duration=_to_duration(view.get('duration')),
            platform='bilibili',
            url=f"https://www.bilibili.com/video/{bvid}",
            description=view.get('desc') or ''
        )
