import os
from typing import Optional
from jinja2 import Environment, FileSystemLoader
from openai import OpenAI
from video_context.config import Settings
from video_context.errors import ModelNotConfiguredError

PROMPTS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "prompts")

def prompt_env() -> Environment:
    return Environment(loader=FileSystemLoader(PROMPTS_DIR))

def build_client(config: Settings) -> OpenAI:
    # 关闭 SDK 自带重试，回退逻辑全部显式处理
    if not config.llm_configured:
        raise ModelNotConfiguredError(
            "Model settings missing: check LLM_API_KEY / LLM_BASE_URL / LLM_MODEL in .env"
        )
    return OpenAI(
        api_key=config.LLM_API_KEY,
        base_url=config.LLM_BASE_URL.rstrip("/"),
        max_retries=0
    )

def message_content(response) -> Optional[str]:
    choices = getattr(response, "choices", None)
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else None
