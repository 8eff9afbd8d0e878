from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class WriteResponse(BaseModel):
    """Outcome of a remote write as reported by the registry."""

    ok: bool
    status_code: Optional[int] = None
    message: Optional[str] = Field(default=None, alias="msg")
    body: Dict[str, Any] = Field(default_factory=dict, repr=False)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
