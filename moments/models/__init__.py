from .api_response import APIResponse, EmptyData, Pagination, PaginatedThoughts
from .compressed import CompressedImage
from .image_data import ThoughtImage
from .selection import SelectedImage
from .thought import CreateThoughtRequest, Thought, ThoughtDraft, UpdateThoughtRequest, Visibility

__all__ = [
    "APIResponse",
    "EmptyData",
    "Pagination",
    "PaginatedThoughts",
    "CompressedImage",
    "ThoughtImage",
    "SelectedImage",
    "CreateThoughtRequest",
    "Thought",
    "ThoughtDraft",
    "UpdateThoughtRequest",
    "Visibility",
]
