from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Crate(BaseModel):
    """Root crate record as returned by the registry."""

    name: str
    downloads: int = 0
    recent_downloads: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    default_version: Optional[str] = Field(
        default=None,
        description="Version shown on the crate page; may be null even when versions exist.",
    )
    num_versions: int = 0
    yanked: bool = False
    # Registry-computed hints, never recomputed locally.
    max_version: Optional[str] = None
    max_stable_version: Optional[str] = None
    newest_version: Optional[str] = None

    description: Optional[str] = None
    homepage: Optional[str] = None
    documentation: Optional[str] = None
    repository: Optional[str] = None
