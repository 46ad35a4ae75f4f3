"""Publish flow: upload the draft's images, then create or update the thought."""
from __future__ import annotations

import logging
from typing import Iterable

from moments.config import get_settings
from moments.errors import ValidationError
from moments.models import CreateThoughtRequest, Thought, ThoughtDraft, UpdateThoughtRequest, Visibility

from .ingestion import ImageIngestor
from .thoughts import ThoughtClient, thought_client

logger = logging.getLogger(__name__)
settings = get_settings()


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim, drop blanks and duplicates, keep first-seen order."""

    result: list[str] = []
    for tag in tags:
        trimmed = tag.strip()
        if trimmed and trimmed not in result:
            result.append(trimmed)
    return result


class Publisher:
    def __init__(self, ingestor: ImageIngestor | None = None, client: ThoughtClient | None = None) -> None:
        self._ingestor = ingestor or ImageIngestor()
        self._client = client or thought_client

    async def publish(self, draft: ThoughtDraft, editing_id: str | None = None) -> Thought:
        """Create a new thought, or update ``editing_id`` when given.

        Raises ``ValidationError`` before any upload if the draft is unusable;
        upload and API errors propagate unchanged.
        """

        content = draft.content.strip()
        if not content:
            raise ValidationError("Content must not be empty")
        if len(draft.images) > settings.image_max_count:
            raise ValidationError(f"At most {settings.image_max_count} images per thought")

        tags = normalize_tags(draft.tags)
        images = await self._ingestor.ingest(draft.images)

        if editing_id is not None:
            thought = await self._client.update_thought(
                editing_id,
                UpdateThoughtRequest(content=draft.content, images=images, tags=tags),
            )
            logger.info("Updated thought %s with %d images", thought.id, len(images))
        else:
            thought = await self._client.create_thought(
                CreateThoughtRequest(
                    content=draft.content,
                    images=images,
                    tags=tags,
                    visibility=Visibility.public,
                )
            )
            logger.info("Created thought %s with %d images", thought.id, len(images))
        return thought
