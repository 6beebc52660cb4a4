from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests
from video_context.config import settings

# 上游请求最多重试一次
MAX_ATTEMPTS = 2

def attempt_limit(max_retries: int) -> int:
    return min(MAX_ATTEMPTS, max(1, max_retries))

def api_retry():
    # MAX_RETRIES 是总尝试次数，默认 1 即不重试
    return retry(
        stop=stop_after_attempt(attempt_limit(settings.MAX_RETRIES)),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((
            requests.exceptions.ConnectionError,
            requests.exceptions.Timeout
        )),
        reraise=True
    )
