import re
from typing import Optional
from urllib.parse import urlparse, parse_qs

BVID_SEARCH_RE = re.compile(r"(BV[0-9A-Za-z]{10})")
BVID_FULL_RE = re.compile(r"^BV[0-9A-Za-z]{10}$")

def extract_bvid(value) -> Optional[str]:
    """从 B 站链接、裸 BV 号或整段文本中提取 BV 号"""
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    m = BVID_SEARCH_RE.search(text)
    if m:
        return m.group(1)

    try:
        p = urlparse(text)
    except ValueError:
        return None
    # 只有绝对 URL 才读 query
    if not p.scheme or not p.netloc:
        return None
    bvid = (parse_qs(p.query or "").get("bvid") or [None])[0]
    if bvid and BVID_FULL_RE.match(bvid):
        return bvid
    return None
