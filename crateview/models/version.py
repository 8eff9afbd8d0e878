from __future__ import annotations

from datetime import datetime
from functools import cached_property
from typing import Optional

import semver as semver_lib
from pydantic import BaseModel, Field

from crateview.versions.parsing import is_prerelease, parse_semver, release_track


class Version(BaseModel):
    """A single published version of a crate."""

    id: int
    num: str
    crate: str = Field(description="Name of the owning crate.")
    created_at: datetime
    updated_at: Optional[datetime] = None
    yanked: bool = False
    yank_message: Optional[str] = None
    downloads: int = 0
    license: Optional[str] = None
    crate_size: Optional[int] = None
    rust_version: Optional[str] = None

    @cached_property
    def semver(self) -> Optional[semver_lib.Version]:
        return parse_semver(self.num)

    @property
    def release_track(self) -> Optional[str]:
        return release_track(self.semver)

    @property
    def is_prerelease(self) -> bool:
        return is_prerelease(self.semver)
