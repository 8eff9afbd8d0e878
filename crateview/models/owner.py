from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel


class Team(BaseModel):
    """Team owner (e.g. ``github:org:team``)."""

    kind: Literal["team"] = "team"
    id: int
    login: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    url: Optional[str] = None


class User(BaseModel):
    """Individual user owner."""

    kind: Literal["user"] = "user"
    id: int
    login: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    url: Optional[str] = None


Owner = Union[Team, User]
