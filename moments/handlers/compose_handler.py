"""Compose endpoints: publish a new thought or update an existing one.

Both take a multipart form. Kept images (already uploaded, sent back as a
JSON list of descriptors) come first in the resulting image list, followed by
the newly attached files in upload order.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from moments.models import SelectedImage, Thought, ThoughtDraft, ThoughtImage
from moments.services.publisher import Publisher

router = APIRouter()
logger = logging.getLogger(__name__)

_KEPT_IMAGES = TypeAdapter(list[ThoughtImage])


@lru_cache()
def get_publisher() -> Publisher:  # pragma: no cover
    return Publisher()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _build_draft(
    content: str,
    tags: list[str],
    kept_images: str,
    images: list[UploadFile],
) -> ThoughtDraft:
    try:
        kept = _KEPT_IMAGES.validate_json(kept_images or "[]")
    except PydanticValidationError as exc:
        raise HTTPException(status_code=422, detail="kept_images must be a JSON list of images") from exc

    selections = [SelectedImage.from_uploaded(image) for image in kept]
    for upload in images:
        selections.append(SelectedImage(data=await upload.read()))
    return ThoughtDraft(content=content, images=selections, tags=tags)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/thoughts", response_model=Thought, response_model_by_alias=True)
async def create_thought(
    content: str = Form(...),
    tags: List[str] = Form([]),
    kept_images: str = Form("[]"),
    images: Optional[List[UploadFile]] = File(None),
    publisher: Publisher = Depends(get_publisher),
):
    draft = await _build_draft(content, tags, kept_images, images or [])
    thought = await publisher.publish(draft)
    logger.info("Thought %s published", thought.id)
    return thought


@router.put("/thoughts/{thought_id}", response_model=Thought, response_model_by_alias=True)
async def update_thought(
    thought_id: str,
    content: str = Form(...),
    tags: List[str] = Form([]),
    kept_images: str = Form("[]"),
    images: Optional[List[UploadFile]] = File(None),
    publisher: Publisher = Depends(get_publisher),
):
    draft = await _build_draft(content, tags, kept_images, images or [])
    thought = await publisher.publish(draft, editing_id=thought_id)
    logger.info("Thought %s updated", thought.id)
    return thought
