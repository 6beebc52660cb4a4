from typing import Optional


class VideoContextError(Exception):
    """Base error for the video-context pipeline."""


class InvalidVideoURLError(VideoContextError, ValueError):
    pass


class BilibiliAPIError(VideoContextError):
    # 接口返回 code != 0 或缺少 data
    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class ModelNotConfiguredError(VideoContextError):
    pass


class SummaryFormatError(VideoContextError, ValueError):
    pass
