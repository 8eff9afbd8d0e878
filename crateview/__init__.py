"""Client-side aggregate views over registry crates."""

from crateview.aggregate import CrateAggregate
from crateview.bootstrap import open_crate
from crateview.config import CrateViewSettings, get_settings

__all__ = [
    "CrateAggregate",
    "CrateViewSettings",
    "get_settings",
    "open_crate",
]
