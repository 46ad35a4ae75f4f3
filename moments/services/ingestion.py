"""Turn the composer's image selections into uploaded image descriptors.

Selections are processed one at a time, in order: decode, normalize,
compress, blur hash, upload. Kept images (selections that already carry a
URL) pass straight through. A single bad input image is skipped; an upload
failure aborts the whole batch and is raised to the caller. Images uploaded
before the failure stay in the bucket.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from moments.config import get_settings
from moments.errors import ImageDecodeError
from moments.models import CompressedImage, SelectedImage, ThoughtImage
from moments.utils.blurhash import blurhash_for_image

from .compressor import compress
from .imaging import ImageBackend, get_backend
from .storage import OSSStorageService, storage_service

logger = logging.getLogger(__name__)
settings = get_settings()


class ImageIngestor:
    """Sequential compress → hash → upload pipeline for one publish action."""

    def __init__(
        self,
        storage: OSSStorageService | None = None,
        backend: ImageBackend | None = None,
    ) -> None:
        self._storage = storage or storage_service
        self._backend = backend or get_backend()

    async def ingest(self, selections: Sequence[SelectedImage]) -> list[ThoughtImage]:
        """Return descriptors for ``selections`` in the same order.

        Skipped selections leave no entry, so the result may be shorter than
        the input.
        """

        results: list[ThoughtImage] = []
        for index, selected in enumerate(selections):
            if selected.is_uploaded:
                results.append(
                    ThoughtImage(
                        url=selected.url,
                        width=selected.width,
                        height=selected.height,
                        blurhash=selected.blurhash,
                    )
                )
                continue

            if not selected.data:
                logger.warning("Selection %d has neither a URL nor image data, skipping", index)
                continue

            try:
                compressed, blurhash = await asyncio.to_thread(self._prepare, selected.data)
            except ImageDecodeError as exc:
                logger.warning("Selection %d is not a usable image, skipping: %s", index, exc)
                continue

            if compressed.is_empty:
                logger.warning("Selection %d compressed to an empty payload, skipping", index)
                continue

            image = await self._storage.upload_image(
                compressed.data,
                compressed.width,
                compressed.height,
                blurhash=blurhash,
            )
            logger.debug("Selection %d uploaded as %s", index, image.url)
            results.append(image)

        return results

    def _prepare(self, data: bytes) -> tuple[CompressedImage, str | None]:
        """CPU-bound part of the pipeline; runs off the event loop."""

        backend = self._backend
        image = backend.normalize(backend.decode(data))
        compressed = compress(image, backend=backend)
        if compressed.is_empty:
            return compressed, None

        try:
            blurhash = blurhash_for_image(
                compressed.image,
                backend,
                components=(settings.blurhash_components_x, settings.blurhash_components_y),
                sample_size=settings.blurhash_sample_size,
            )
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Blur hash generation failed, uploading without one: %s", exc)
            blurhash = None

        logger.debug(
            "Prepared image %dx%d, %d bytes, blurhash %s",
            compressed.width,
            compressed.height,
            len(compressed.data),
            blurhash,
        )
        return compressed, blurhash
