from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # LLM Configuration
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = "https://api.openai.com/v1"
    LLM_MODEL: str = "gpt-4o"
    LLM_TEMPERATURE: float = 0.2

    # Frame analysis
    VISION_MAX_COMPLETION_TOKENS: int = 2048
    IMAGE_UNSUPPORTED_MARKER: str = "not support image params"

    # Bilibili
    BILIBILI_USER_AGENT: str = "Mozilla/5.0"
    REQUEST_TIMEOUT: float = 30.0

    # System Settings
    LOG_LEVEL: str = "INFO"
    MAX_RETRIES: int = 1

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def llm_configured(self) -> bool:
        return bool(self.LLM_API_KEY and self.LLM_BASE_URL and self.LLM_MODEL)

settings = Settings()
