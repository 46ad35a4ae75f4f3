"""Moments backend API wrapper.

Async CRUD for thoughts. Every endpoint answers with the envelope
``{"code": int, "msg": str, "data": ...}``; ``code == 0`` means success.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from moments.config import get_settings
from moments.errors import DecodingError, NetworkError, NotFoundError, ServerError, UnauthorizedError
from moments.models import (
    APIResponse,
    CreateThoughtRequest,
    EmptyData,
    PaginatedThoughts,
    Thought,
    UpdateThoughtRequest,
)

logger = logging.getLogger(__name__)
settings = get_settings()

T = TypeVar("T", bound=BaseModel)


class ThoughtClient:
    """Minimal async client for the Moments journal backend."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def list_thoughts(self, page: int = 1, page_size: int = 10, tag: str | None = None) -> PaginatedThoughts:
        params: dict[str, Any] = {"page": page, "limit": page_size}
        if tag:
            params["tag"] = tag
        return await self._request("GET", "/moments", PaginatedThoughts, params=params)

    async def get_thought(self, thought_id: str) -> Thought:
        return await self._request("GET", f"/moments/{thought_id}", Thought)

    async def create_thought(self, request: CreateThoughtRequest) -> Thought:
        return await self._request("POST", "/moments", Thought, body=request)

    async def update_thought(self, thought_id: str, request: UpdateThoughtRequest) -> Thought:
        return await self._request("PUT", f"/moments/{thought_id}", Thought, body=request)

    async def delete_thought(self, thought_id: str) -> None:
        await self._request("DELETE", f"/moments/{thought_id}", EmptyData, allow_empty=True)

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        model: type[T],
        *,
        params: dict[str, Any] | None = None,
        body: BaseModel | None = None,
        allow_empty: bool = False,
    ) -> T | None:
        payload = body.model_dump(mode="json", by_alias=True, exclude_none=True) if body is not None else None
        logger.debug("%s %s", method, path)
        try:
            resp = await self._client.request(method, path, params=params, json=payload)
        except httpx.TransportError as exc:
            raise NetworkError(exc) from exc

        if resp.status_code == 401:
            raise UnauthorizedError("Unauthorized")
        if resp.status_code == 404:
            raise NotFoundError(f"{method} {path} not found")
        if not 200 <= resp.status_code <= 299:
            raise ServerError(resp.status_code, resp.text or "Server error")

        try:
            envelope = APIResponse[model].model_validate_json(resp.content)
        except PydanticValidationError as exc:
            raise DecodingError(exc) from exc

        if not envelope.is_success:
            raise ServerError(envelope.code, envelope.msg)
        if envelope.data is None and not allow_empty:
            raise ServerError(envelope.code, envelope.msg or "Missing response data")
        return envelope.data


def build_thought_client(**overrides) -> ThoughtClient:
    token = settings.moments_api_token.get_secret_value() if settings.moments_api_token else None
    options: dict[str, Any] = {"base_url": settings.moments_api_base_url, "token": token}
    options.update(overrides)
    return ThoughtClient(**options)


# ------------------------------------------------------------------
# Singleton instance
# ------------------------------------------------------------------

thought_client = build_thought_client()
