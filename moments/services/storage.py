"""Aliyun OSS upload helper for Moments.

Uploads compressed images with a single signed PUT per object and returns the
public URL. Objects are stored under the following key pattern:

    {upload_dir}/{yyyy}/{MM}/{dd}/{epoch_millis}_{uuid8}.jpg

The timestamp plus random suffix keeps keys unique without any coordination,
so uploading identical bytes twice produces two objects.

Requests are authenticated with the OSS header signature scheme::

    Authorization: OSS {access_key_id}:base64(hmac_sha1(secret, string_to_sign))
    string_to_sign = VERB \\n Content-MD5 \\n Content-Type \\n Date \\n /{bucket}/{key}
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import uuid
from datetime import datetime, timezone
from email.utils import format_datetime

import httpx

from moments.config import get_settings
from moments.errors import InvalidURLError, NetworkError, ServerError
from moments.models import ThoughtImage

logger = logging.getLogger(__name__)
settings = get_settings()

JPEG_CONTENT_TYPE = "image/jpeg"


# ------------------------------------------------------------------
# Signing helpers
# ------------------------------------------------------------------

def http_date(now: datetime | None = None) -> str:
    """RFC 1123 date in GMT, e.g. ``Mon, 19 Oct 2026 08:05:09 GMT``."""

    now = now or datetime.now(timezone.utc)
    return format_datetime(now.astimezone(timezone.utc), usegmt=True)


def canonical_string(
    method: str,
    content_type: str,
    date: str,
    bucket: str,
    object_key: str,
    content_md5: str = "",
) -> str:
    return f"{method}\n{content_md5}\n{content_type}\n{date}\n/{bucket}/{object_key}"


def sign(secret: str, string_to_sign: str) -> str:
    digest = hmac.new(
        key=secret.encode("utf-8"),
        msg=string_to_sign.encode("utf-8"),
        digestmod=hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def build_object_key(upload_dir: str, now: datetime | None = None, uid: uuid.UUID | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    uid = uid or uuid.uuid4()
    millis = int(now.timestamp() * 1000)
    return f"{upload_dir}/{now:%Y/%m/%d}/{millis}_{uid.hex[:8]}.jpg"


# ------------------------------------------------------------------
# Service
# ------------------------------------------------------------------


class OSSStorageService:  # pylint: disable=too-few-public-methods
    """Signed PUT uploads against a single OSS bucket."""

    def __init__(
        self,
        *,
        access_key_id: str,
        access_key_secret: str,
        bucket: str,
        endpoint: str,
        upload_dir: str = "moments",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._access_key_id = access_key_id
        self._access_key_secret = access_key_secret
        self._bucket = bucket
        self._endpoint = endpoint.rstrip("/")
        self._upload_dir = upload_dir.strip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def upload_image(
        self,
        data: bytes,
        width: int,
        height: int,
        *,
        blurhash: str | None = None,
    ) -> ThoughtImage:
        """Upload a JPEG payload and return its image descriptor."""

        object_key = build_object_key(self._upload_dir)
        url = await self.put_object(data, object_key, JPEG_CONTENT_TYPE)
        return ThoughtImage(url=url, width=width, height=height, blurhash=blurhash)

    async def put_object(self, data: bytes, object_key: str, content_type: str) -> str:
        """PUT ``data`` at ``object_key`` and return the object URL."""

        url = f"{self._endpoint}/{object_key}"
        if not url.startswith(("http://", "https://")):
            raise InvalidURLError(f"Invalid upload URL: {url}")

        date = http_date()
        signature = sign(
            self._access_key_secret,
            canonical_string("PUT", content_type, date, self._bucket, object_key),
        )
        headers = {
            "Content-Type": content_type,
            "Date": date,
            "Authorization": f"OSS {self._access_key_id}:{signature}",
            "Content-Length": str(len(data)),
        }

        logger.debug("PUT %s (%d bytes)", url, len(data))
        try:
            resp = await self._client.put(url, content=data, headers=headers)
        except httpx.TransportError as exc:
            logger.error("OSS upload network error for %s: %s", url, exc)
            raise NetworkError(exc) from exc

        if not 200 <= resp.status_code <= 299:
            logger.error("OSS upload failed - status %s: %s", resp.status_code, resp.text)
            raise ServerError(resp.status_code, f"OSS upload failed: {resp.text}")

        logger.info("Uploaded image to %s", url)
        return url

    async def close(self) -> None:
        await self._client.aclose()


def build_storage_service(**overrides) -> OSSStorageService:
    """Create a service from settings; keyword arguments override them."""

    options = {
        "access_key_id": settings.oss_access_key_id,
        "access_key_secret": settings.oss_access_key_secret.get_secret_value(),
        "bucket": settings.oss_bucket,
        "endpoint": settings.oss_endpoint,
        "upload_dir": settings.oss_upload_dir,
        "timeout": settings.oss_timeout,
    }
    options.update(overrides)
    return OSSStorageService(**options)


# Singleton instance
storage_service = build_storage_service()
