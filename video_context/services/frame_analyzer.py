from typing import Literal, Optional
import openai
from pydantic import BaseModel
from video_context.config import Settings, settings
from video_context.services.llm import build_client, message_content, prompt_env
from video_context.utils.logger import logger

BUSY_MESSAGE = "识别服务繁忙 ({status})，正在重试..."
INSUFFICIENT_MESSAGE = "当前画面信息不足，请尝试在光线充足或主体清晰的片段暂停"
UNSTABLE_MESSAGE = "服务连接不稳定，请稍后重试"

class Attempt(BaseModel):
    # soft_failure: 2xx 但没有内容; unsupported: 模型不接受图片; hard_failure: 其他非 2xx
    status: Literal["success", "soft_failure", "unsupported", "hard_failure"]
    content: Optional[str] = None
    status_code: Optional[int] = None

def _error_text(err: openai.APIStatusError) -> str:
    parts = [str(err.message or ""), str(err.body or "")]
    try:
        parts.append(err.response.text)
    except Exception:
        # 响应体已读取或无法解码
        pass
    return "\n".join(parts)

class FrameAnalyzer:
    def __init__(self, client=None, config: Settings = None):
        self.config = config or settings
        self._client = client
        self.env = prompt_env()
        self.system_template = self.env.get_template("frame_system.jinja2")
        self.user_template = self.env.get_template("frame_user.jinja2")
        self.text_fallback_template = self.env.get_template("frame_text_fallback.jinja2")

    @property
    def client(self):
        if self._client is None:
            self._client = build_client(self.config)
        return self._client

    def _attempt_vision(self, image_data: str, context_text: str) -> Attempt:
        try:
            response = self.client.chat.completions.create(
                model=self.config.LLM_MODEL,
                max_completion_tokens=self.config.VISION_MAX_COMPLETION_TOKENS,
                messages=[
                    {"role": "system", "content": self.system_template.render()},
                    {"role": "user", "content": [
                        {"type": "text", "text": self.user_template.render(context_text=context_text)},
                        {"type": "image_url", "image_url": {"url": image_data}}
                    ]}
                ]
            )
        except openai.APIStatusError as e:
            logger.error(f"Vision request failed ({e.status_code}): {e.message}")
            if e.status_code == 400 and self.config.IMAGE_UNSUPPORTED_MARKER in _error_text(e):
                return Attempt(status="unsupported", status_code=e.status_code)
            return Attempt(status="hard_failure", status_code=e.status_code)

        content = message_content(response)
        if content:
            return Attempt(status="success", content=content)
        logger.warning(f"Vision request returned empty content: {response!r}")
        return Attempt(status="soft_failure")

    def _attempt_text_only(self, context_text: str) -> Attempt:
        try:
            response = self.client.chat.completions.create(
                model=self.config.LLM_MODEL,
                messages=[
                    {"role": "system", "content": self.text_fallback_template.render()},
                    {"role": "user", "content": f"视频标题：{context_text}"}
                ]
            )
        except openai.APIStatusError as e:
            logger.error(f"Text-only fallback failed ({e.status_code}): {e.message}")
            return Attempt(status="hard_failure", status_code=e.status_code)
        except Exception as e:
            logger.error(f"Text-only fallback failed: {e}")
            return Attempt(status="hard_failure")

        content = message_content(response)
        if content:
            return Attempt(status="success", content=content)
        return Attempt(status="soft_failure")

    def analyze(self, image_data: str, context_text: str = "") -> str:
        """分析单帧画面，总是返回可展示给用户的文本"""
        context_text = context_text or ""
        try:
            logger.info(f"Analyzing frame with model {self.config.LLM_MODEL} ({len(image_data or '')} chars)")
            vision = self._attempt_vision(image_data, context_text)
            if vision.status == "success":
                return vision.content
            if vision.status == "hard_failure":
                return BUSY_MESSAGE.format(status=vision.status_code)
            if vision.status == "unsupported":
                logger.warning("Model does not support image input, falling back to title-based analysis")

            if context_text.strip():
                logger.info(f"Attempting text-only analysis with context: {context_text[:50]}")
                text = self._attempt_text_only(context_text)
                if text.status == "success":
                    return text.content
            return INSUFFICIENT_MESSAGE
        except Exception as e:
            logger.error(f"Frame analysis failed: {e}")
            return UNSTABLE_MESSAGE
