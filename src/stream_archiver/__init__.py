"""Stream Archiver - Download Twitch and YouTube videos with their metadata, thumbnails and chat."""

__version__ = "0.1.0"
__description__ = "Archive Twitch VODs, highlights, clips and YouTube videos together with metadata, thumbnails and chat"

from stream_archiver.domain.models import ChannelHandle, Platform, VideoRecord

__all__ = ["ChannelHandle", "Platform", "VideoRecord"]
