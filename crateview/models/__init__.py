"""Record models for crates and their relations."""

from .crate import Crate
from .owner import Owner, Team, User
from .responses import WriteResponse
from .taxonomy import Category, Keyword
from .version import Version

__all__ = [
    "Category",
    "Crate",
    "Keyword",
    "Owner",
    "Team",
    "User",
    "Version",
    "WriteResponse",
]
