"""Social media downloaders and media streaming."""

from mediahub.content.base import RapidAPIClient
from mediahub.content.instagram import InstagramClient
from mediahub.content.tiktok import TikTokClient
from mediahub.content.vidu import ViduClient
from mediahub.content.youtube import YouTubeClient

__all__ = [
    "RapidAPIClient",
    "YouTubeClient",
    "InstagramClient",
    "TikTokClient",
    "ViduClient",
]
