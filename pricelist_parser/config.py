"""
Provider configuration: which sections to extract from each price list.

    {
      "providers": {
        "telekom": {
          "sections": {"roaming": "INTERNET V ZAHRANIČÍ", ...},
          "occurrence_overrides": {"INTERNET V ZAHRANIČÍ": 1},
          "toc_page": 2
        }
      }
    }
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, ValidationError, field_validator

from pricelist_parser.errors import ConfigError
from pricelist_parser.pipeline.toc import TocFormat
from pricelist_parser.state import PageLayoutMode, SectionSpec

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PRICELIST_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/providers.json")


class ProviderSettings(BaseModel):
    """One provider's entry in the config file, as written."""

    model_config = ConfigDict(extra="forbid")

    sections: dict[str, str] = Field(min_length=1)
    occurrence_overrides: dict[str, NonNegativeInt] = Field(default_factory=dict)
    toc_page: PositiveInt = 2
    toc_format: TocFormat = TocFormat.TITLE_FIRST
    layout: PageLayoutMode | None = None
    reflow_variants: list[tuple[str, str]] = Field(default_factory=list)
    toc_ignore: list[str] = Field(default_factory=list)
    verify_next_page: bool = False

    @field_validator("sections")
    @classmethod
    def _titles_present(cls, sections: dict[str, str]) -> dict[str, str]:
        for key, title in sections.items():
            if not title.strip():
                raise ValueError(f"section {key!r} has no title")
        return sections


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    sections: list[SectionSpec]
    occurrence_overrides: dict[tuple[str, str], int] = field(default_factory=dict)
    toc_page: int = 2
    toc_format: TocFormat = TocFormat.TITLE_FIRST
    layout: PageLayoutMode | None = None
    reflow_variants: list[tuple[str, str]] = field(default_factory=list)
    toc_ignore: list[str] = field(default_factory=list)
    verify_next_page: bool = False


def config_path(explicit: str | Path | None = None) -> Path:
    if explicit:
        return Path(explicit)
    return Path(os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)


def parse_provider(name: str, raw: object) -> ProviderConfig:
    try:
        settings = ProviderSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Provider {name!r}: {exc}") from exc

    return ProviderConfig(
        name=name,
        sections=[SectionSpec(key=key, title=title) for key, title in settings.sections.items()],
        occurrence_overrides={(name, title): n for title, n in settings.occurrence_overrides.items()},
        toc_page=settings.toc_page,
        toc_format=settings.toc_format,
        layout=settings.layout,
        reflow_variants=list(settings.reflow_variants),
        toc_ignore=list(settings.toc_ignore),
        verify_next_page=settings.verify_next_page,
    )


def _unique_keys(pairs: list[tuple[str, object]]) -> dict:
    data = {}
    for key, value in pairs:
        if key in data:
            raise ConfigError(f"Duplicate key {key!r} in config")
        data[key] = value
    return data


def load_config(path: str | Path | None = None) -> dict:
    path = config_path(path)
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh, object_pairs_hook=_unique_keys)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("providers"), dict):
        raise ConfigError(f"Config file {path} has no 'providers' object")
    return data


def load_provider_config(provider: str, path: str | Path | None = None) -> ProviderConfig:
    providers = load_config(path)["providers"]
    if provider not in providers:
        known = ", ".join(sorted(providers)) or "none"
        raise ConfigError(f"Unknown provider {provider!r} (configured: {known})")
    config = parse_provider(provider, providers[provider])
    logger.info("Loaded %d section(s) for provider %r", len(config.sections), provider)
    return config
