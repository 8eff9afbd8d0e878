from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Keyword(BaseModel):
    id: str
    keyword: str
    crates_cnt: int = 0
    created_at: Optional[datetime] = None


class Category(BaseModel):
    id: str
    category: str
    slug: str
    description: Optional[str] = None
    crates_cnt: int = 0
    created_at: Optional[datetime] = None
