"""MediaHub - stock photo, design asset, movie and social media proxy API."""

from mediahub.config import Settings, get_settings
from mediahub.errors import MediaHubError

__version__ = "0.1.0"
__all__ = ["MediaHubError", "Settings", "get_settings"]
