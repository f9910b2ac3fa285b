"""
Course thumbnail upload to Cloudinary.

Uses the signed upload REST endpoint; the stored value is the stable
``secure_url`` Cloudinary returns.
"""

import hashlib
import logging
import time
from typing import Optional

import httpx

from common.utils.exceptions import ServerException

logger = logging.getLogger(__name__)


class ThumbnailService:
    """
    Uploads course thumbnail images to the media host.
    """

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        timeout: float = 60.0,
    ):
        """
        Initialize ThumbnailService.

        Args:
            cloud_name: Cloudinary cloud name
            api_key: Cloudinary API key
            api_secret: Cloudinary API secret used for request signing
            timeout: Upload timeout in seconds
        """
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._timeout = timeout
        self._base_url = "https://api.cloudinary.com/v1_1"

    @property
    def is_configured(self) -> bool:
        return bool(self._cloud_name and self._api_key and self._api_secret)

    def sign(self, timestamp: int) -> str:
        """SHA-1 request signature over the signed parameters."""
        payload = f"timestamp={timestamp}{self._api_secret}"
        return hashlib.sha1(payload.encode("utf-8")).hexdigest()

    async def upload(
        self,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload an image and return its stable HTTPS URL.

        Args:
            filename: Original file name
            content: Raw image bytes
            content_type: MIME type of the image

        Returns:
            The uploaded image's secure URL
        """
        if not self.is_configured:
            raise ServerException(
                message="Media host not configured",
                code="MEDIA_HOST_MISSING"
            )

        timestamp = int(time.time())
        data = {
            "api_key": self._api_key,
            "timestamp": str(timestamp),
            "signature": self.sign(timestamp),
        }
        files = {"file": (filename or "thumbnail", content, content_type or "application/octet-stream")}

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self._base_url}/{self._cloud_name}/image/upload",
                    data=data,
                    files=files,
                    timeout=self._timeout
                )

                if response.status_code != 200:
                    logger.error(
                        f"Cloudinary upload error: {response.status_code} - {response.text}"
                    )
                    raise ServerException(
                        message="Failed to upload thumbnail",
                        code="UPLOAD_FAILED"
                    )

                secure_url = response.json().get("secure_url")

        except httpx.RequestError as e:
            logger.error(f"Cloudinary request error: {e}")
            raise ServerException(
                message="Failed to connect to media host",
                code="UPLOAD_FAILED"
            )

        if not secure_url:
            raise ServerException(
                message="Failed to upload thumbnail",
                code="UPLOAD_FAILED"
            )

        logger.info(f"Thumbnail uploaded: {secure_url}")
        return secure_url
