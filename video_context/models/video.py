from datetime import datetime
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from video_context.models.summary import Chapter

class VideoMetadata(BaseModel):
    id: str
    cid: Optional[int] = None
    title: str
    author: str
    duration: float
    platform: str
    url: str
    description: Optional[str] = None

class VideoSourceInfo(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    platform: str = "bilibili"
    bvid: str
    cid: Optional[int] = None
    duration: float
    title: str
    owner: str
    video_url: str
    play_url: Optional[str] = None
    fetched_at: datetime
    llm_used: bool

class VideoContextResult(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    source: VideoSourceInfo
    context: str
    chapters: Tuple[Chapter, ...]
