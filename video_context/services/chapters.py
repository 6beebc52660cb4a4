import math
from typing import Iterable, List, Optional
from video_context.models.danmaku import CommentEntry
from video_context.models.summary import Chapter

MIN_CHAPTERS = 3
MAX_CHAPTERS = 6
TARGET_WINDOW_SEC = 90
DEFAULT_CHAPTER_SEC = 60
EMPTY_SUMMARY = "该章节暂无高置信摘要"
SUMMARY_SEPARATOR = "；"

def chapter_title(index: int) -> str:
    return f"章节 {index + 1}"

def chapter_id(index: int) -> str:
    return f"sec_{index + 1}"

def safe_duration(duration) -> int:
    try:
        value = float(duration or 0)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value):
        value = 0.0
    return max(1, math.floor(value))

def unique_texts(entries: Iterable[CommentEntry], limit: int = 6) -> List[str]:
    result = []
    seen = set()
    for entry in entries:
        text = entry.text
        if not text or text in seen:
            continue
        seen.add(text)
        result.append(text)
        if len(result) >= limit:
            break
    return result

def _window_plan(total: int):
    count = max(MIN_CHAPTERS, min(MAX_CHAPTERS, math.floor(total / TARGET_WINDOW_SEC + 0.5)))
    step = math.ceil(total / count)
    if (count - 1) * step >= total:
        # 极短视频：向上取整的步长会让末尾窗口为空
        count = min(count, total)
        step = total // count
    return count, step

def build_sections(duration, danmaku_entries: Iterable[CommentEntry]) -> List[Chapter]:
    """按约 90 秒切成 3-6 个连续窗口，每个窗口取最多三条不重复弹幕作为摘要。"""
    total = safe_duration(duration)
    entries = list(danmaku_entries or [])
    count, step = _window_plan(total)

    chapters = []
    for i in range(count):
        start_sec = i * step
        end_sec = total if i == count - 1 else min(total, (i + 1) * step)
        in_window = [d for d in entries if start_sec <= d.second < end_sec]
        summary = SUMMARY_SEPARATOR.join(unique_texts(in_window, 3)) or EMPTY_SUMMARY
        chapters.append(Chapter(
            id=chapter_id(i),
            title=chapter_title(i),
            start_sec=start_sec,
            end_sec=end_sec,
            summary=summary
        ))
    return chapters

def _to_seconds(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return math.floor(number)

def normalize_chapters(raw_chapters: list, duration) -> List[Chapter]:
    # id 在过滤和排序之后分配，重复规整结果不变
    total = safe_duration(duration)
    shaped = []
    for index, chapter in enumerate(raw_chapters):
        if not isinstance(chapter, dict):
            chapter = {}
        start_raw = _to_seconds(chapter.get("startSec", chapter.get("start_sec")))
        end_raw = _to_seconds(chapter.get("endSec", chapter.get("end_sec")))
        start_sec = max(0, start_raw) if start_raw is not None else 0
        if end_raw is None:
            end_sec = min(total, start_sec + DEFAULT_CHAPTER_SEC)
        else:
            end_sec = min(total, max(start_sec + 1, end_raw))

        title = chapter.get("title")
        title = title.strip() if isinstance(title, str) and title.strip() else chapter_title(index)
        summary = chapter.get("summary")
        summary = summary.strip() if isinstance(summary, str) else ""

        if end_sec <= start_sec:
            continue
        shaped.append((start_sec, end_sec, title, summary))

    shaped.sort(key=lambda c: c[0])
    return [
        Chapter(id=chapter_id(i), title=title, start_sec=start_sec, end_sec=end_sec, summary=summary)
        for i, (start_sec, end_sec, title, summary) in enumerate(shaped)
    ]
