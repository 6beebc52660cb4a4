import json
import re
from typing import List, Optional
from video_context.config import Settings, settings
from video_context.errors import SummaryFormatError
from video_context.models.danmaku import CommentEntry
from video_context.models.summary import SummaryOutcome
from video_context.services.chapters import build_sections, normalize_chapters, unique_texts
from video_context.services.llm import build_client, message_content, prompt_env
from video_context.utils.logger import logger

FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
DANMAKU_SAMPLE_LIMIT = 30

def parse_json_from_text(text) -> Optional[object]:
    raw = str(text or "").strip()
    if not raw:
        return None
    m = FENCE_RE.search(raw)
    candidate = m.group(1) if m else raw
    try:
        return json.loads(candidate)
    except ValueError:
        return None

def fallback_context(title: str) -> str:
    return f"{title}：基于视频元数据与弹幕样本的回退摘要。建议补充可用模型配置以获取更精准章节。"

class SummarizerService:
    def __init__(self, client=None, config: Settings = None):
        self.config = config or settings
        self._client = client
        self.env = prompt_env()
        self.system_template = self.env.get_template("summary_system.jinja2")
        self.user_template = self.env.get_template("summary_user.jinja2")

    @property
    def client(self):
        if self._client is None:
            self._client = build_client(self.config)
        return self._client

    def _call_llm(self, system_prompt: str, user_prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.config.LLM_MODEL,
            temperature=self.config.LLM_TEMPERATURE,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ]
        )
        return message_content(response) or ""

    def build_prompt_payload(self, video_url: str, title: str, description: str, duration, play_url: Optional[str], danmaku_entries: List[CommentEntry]) -> dict:
        return {
            "videoUrl": video_url,
            "directVideoUrl": play_url,
            "title": title,
            "description": description,
            "durationSec": duration,
            "danmakuSamples": unique_texts(danmaku_entries, DANMAKU_SAMPLE_LIMIT)
        }

    def _llm_summarize(self, video_url, title, description, duration, play_url, danmaku_entries) -> SummaryOutcome:
        payload = self.build_prompt_payload(video_url, title, description, duration, play_url, danmaku_entries)
        system_prompt = self.system_template.render(duration=duration)
        user_prompt = self.user_template.render(payload=json.dumps(payload, ensure_ascii=False))

        content = self._call_llm(system_prompt, user_prompt)
        parsed = parse_json_from_text(content)
        if not isinstance(parsed, dict) or not isinstance(parsed.get("context"), str) or not isinstance(parsed.get("chapters"), list):
            raise SummaryFormatError(f"Model answer is not a {{context, chapters}} object: {str(content)[:200]!r}")

        chapters = normalize_chapters(parsed["chapters"], duration)
        if not chapters:
            raise SummaryFormatError("Model answer has no usable chapters")

        return SummaryOutcome(context=parsed["context"].strip(), chapters=chapters, llm_used=True)

    def summarize(self, video_url: str, title: str, description: str, duration, play_url: Optional[str], danmaku_entries: List[CommentEntry]) -> SummaryOutcome:
        """生成 context + chapters，任何失败都回退到按时间切分的章节，不抛异常"""
        try:
            logger.info(f"Summarizing '{title}' with {self.config.LLM_MODEL} ({len(danmaku_entries)} danmaku)...")
            return self._llm_summarize(video_url, title, description, duration, play_url, danmaku_entries)
        except Exception as e:
            logger.error(f"LLM summarize failed, using fallback chapters: {e}")
            return SummaryOutcome(
                context=fallback_context(title),
                chapters=build_sections(duration, danmaku_entries),
                llm_used=False
            )
