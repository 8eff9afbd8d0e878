"""Client configuration."""

from .settings import DEFAULT_CONFIG_LOCATIONS, CrateViewSettings, get_settings

__all__ = ["DEFAULT_CONFIG_LOCATIONS", "CrateViewSettings", "get_settings"]
