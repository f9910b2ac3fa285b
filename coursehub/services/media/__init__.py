"""Media services."""

from coursehub.services.media.thumbnail_service import ThumbnailService

__all__ = [
    "ThumbnailService",
]
