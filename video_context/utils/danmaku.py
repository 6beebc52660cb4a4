import math
import re
from typing import List
from video_context.models.danmaku import CommentEntry

# 弹幕 XML: <d p="time,mode,size,color,ctime,pool,uhash,dmid,weight">text</d>
# 逐条匹配而不是整篇 XML 解析：单条坏弹幕只跳过自己，不影响整篇。
# 正文不能跨过下一个 <d，否则未闭合的元素会吞掉后面的弹幕。
DANMAKU_RE = re.compile(r'<d p="([^"]+)">((?:(?!<d[\s>]).)*?)</d>', re.DOTALL)
LEADING_FLOAT_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
ENTITY_RE = re.compile(r"&(?:amp|lt|gt|quot|#39);")

ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}

def decode_html_entities(text: str) -> str:
    # 单次替换，&amp;lt; -> &lt;
    return ENTITY_RE.sub(lambda m: ENTITIES[m.group(0)], text)

def _parse_second(field: str):
    m = LEADING_FLOAT_RE.match(field)
    if not m:
        return None
    try:
        value = float(m.group(0))
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value

def parse_danmaku_xml(xml_text: str) -> List[CommentEntry]:
    entries = []
    if not xml_text:
        return entries
    for p_attr, content in DANMAKU_RE.findall(xml_text):
        second = _parse_second(p_attr.split(",")[0])
        if second is None:
            continue
        entries.append(CommentEntry(second=second, text=decode_html_entities(content).strip()))
    return entries
