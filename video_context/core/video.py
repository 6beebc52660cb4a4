from abc import ABC, abstractmethod
from typing import List, Optional
from video_context.models.danmaku import CommentEntry
from video_context.models.video import VideoMetadata

class VideoSource(ABC):
    @abstractmethod
    def extract_info(self, video_id: str) -> VideoMetadata:
        """Fetch base video metadata. Failures propagate."""
        pass

    @abstractmethod
    def get_play_url(self, video_id: str, cid: int) -> Optional[str]:
        """Resolve a playable stream URL, or None."""
        pass

    @abstractmethod
    def get_danmaku(self, cid: int) -> List[CommentEntry]:
        """Fetch and parse the comment stream of one page."""
        pass
