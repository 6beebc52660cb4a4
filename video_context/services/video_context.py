from datetime import datetime, timezone
from video_context.core.video import VideoSource
from video_context.errors import InvalidVideoURLError
from video_context.models.video import VideoContextResult, VideoSourceInfo
from video_context.providers.bilibili import BilibiliProvider
from video_context.services.frame_analyzer import FrameAnalyzer
from video_context.services.summarizer import SummarizerService
from video_context.utils.bvid import extract_bvid
from video_context.utils.logger import logger

class VideoContextService:
    def __init__(self, provider: VideoSource = None, summarizer: SummarizerService = None, frame_analyzer: FrameAnalyzer = None):
        self.provider = provider or BilibiliProvider()
        self.summarizer = summarizer or SummarizerService()
        self.frame_analyzer = frame_analyzer or FrameAnalyzer()

    def get_video_context_and_chapters(self, video_url: str) -> VideoContextResult:
        # 只有 BV 号缺失或基础信息拿不到时才抛出，弹幕和播放地址失败都降级
        bvid = extract_bvid(video_url)
        if not bvid:
            raise InvalidVideoURLError("Invalid Bilibili URL or BV id not found.")

        metadata = self.provider.extract_info(bvid)
        cid = metadata.cid

        danmaku_entries = []
        play_url = None
        if cid:
            try:
                danmaku_entries = self.provider.get_danmaku(cid)
            except Exception as e:
                logger.warning(f"Danmaku fetch failed for cid {cid}: {e}")
                danmaku_entries = []
            try:
                play_url = self.provider.get_play_url(bvid, cid)
            except Exception as e:
                logger.warning(f"Play URL fetch failed for cid {cid}: {e}")
                play_url = None

        outcome = self.summarizer.summarize(
            video_url,
            metadata.title,
            metadata.description or "",
            metadata.duration,
            play_url,
            danmaku_entries
        )

        return VideoContextResult(
            source=VideoSourceInfo(
                platform=metadata.platform,
                bvid=bvid,
                cid=cid,
                duration=metadata.duration,
                title=metadata.title,
                owner=metadata.author,
                video_url=video_url,
                play_url=play_url,
                fetched_at=datetime.now(timezone.utc),
                llm_used=outcome.llm_used
            ),
            context=outcome.context,
            chapters=outcome.chapters
        )

    def analyze_video_frame(self, image_data: str, context_text: str = "") -> str:
        return self.frame_analyzer.analyze(image_data, context_text)
