"""Client configuration loading and validation."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar, Dict, Iterable, Literal

import yaml
from pydantic import AnyHttpUrl, Field, PositiveFloat, PositiveInt
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_LOCATIONS: tuple[Path, ...] = (
    Path("/etc/crateview/crateview.yaml"),
    Path("/etc/crateview/crateview.yml"),
    Path("./config/crateview.yaml"),
    Path("./config/crateview.yml"),
)


class CrateViewSettings(BaseSettings):
    """Validated settings for the crate aggregate client."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="CRATEVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote registry
    api_base_url: AnyHttpUrl = Field(
        default="https://crates.io/api/v1",
        description="Base URL of the registry REST API.",
    )
    user_agent: str = Field(
        default="crateview/0.1.0",
        description="User-Agent header sent with every request.",
    )
    auth_token: str | None = Field(
        default=None,
        description="API token attached as the Authorization header for writes.",
        repr=False,
    )
    request_timeout_seconds: PositiveFloat = Field(
        default=30.0,
        description="Timeout applied to each HTTP request.",
    )
    versions_page_size: PositiveInt = Field(
        default=100,
        description="Page size requested when listing crate versions.",
    )

    # Contract checks
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment flavour; production downgrades precondition violations to warnings.",
    )
    strict_preconditions: bool | None = Field(
        default=None,
        description="Force precondition checks to raise (True) or warn (False); derived from environment when unset.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum log level for the client process.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value: str) -> str:
        if isinstance(value, str):
            return value.lower()
        return value

    config_path: Path | None = Field(
        default=None,
        description="Resolved path to the on-disk config that seeded the settings.",
        exclude=True,
    )

    @property
    def preconditions_are_strict(self) -> bool:
        if self.strict_preconditions is not None:
            return self.strict_preconditions
        return self.environment != "production"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[CrateViewSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            cls._yaml_settings_source,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @staticmethod
    def _yaml_settings_source(settings_cls: type[CrateViewSettings] | None = None) -> Dict[str, Any]:
        candidates: Iterable[Path] = CrateViewSettings._resolve_candidate_paths()

        for path in candidates:
            data = CrateViewSettings._load_file(path)
            if data is not None:
                data.setdefault("config_path", path)
                return data
        return {}

    @staticmethod
    def _resolve_candidate_paths() -> Iterable[Path]:
        explicit = os.getenv("CRATEVIEW_CONFIG_FILE")
        if explicit:
            yield Path(explicit).expanduser()
        yield from DEFAULT_CONFIG_LOCATIONS

    @staticmethod
    def _load_file(path: Path) -> Dict[str, Any] | None:
        if not path.is_file():
            return None
        suffix = path.suffix.lower()
        try:
            with path.open("r", encoding="utf-8") as handle:
                if suffix in {".yaml", ".yml"}:
                    raw = yaml.safe_load(handle)
                elif suffix == ".json":
                    raw = json.load(handle)
                else:
                    return None
        except OSError as exc:
            raise RuntimeError(f"Failed to read crateview config file {path}") from exc
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ValueError(f"Invalid crateview config file {path}") from exc

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ValueError(f"Crateview config file {path} must contain a mapping at top level.")
        return raw


@lru_cache()
def get_settings() -> CrateViewSettings:
    """Return memoized client settings."""

    return CrateViewSettings()
