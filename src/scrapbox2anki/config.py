"""Configuration loader for s2a.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .core.model import DEFAULT_DECK, Deck

CONFIG_FILE = "s2a.toml"


@dataclass
class ProjectConfig:
    """Project the pages belong to."""
    name: str = "default"


@dataclass
class PagesConfig:
    """Where page dumps are read from."""
    root: Path


@dataclass
class OutputConfig:
    """Where the note bundle is written."""
    path: Path


@dataclass
class LogConfig:
    level: str = "WARNING"


@dataclass
class DefaultsConfig:
    """Fallbacks used when a page names no deck or a broken one."""
    deck: Deck


@dataclass
class S2AConfig:
    """Complete scrapbox2anki configuration."""
    project: ProjectConfig
    pages: PagesConfig
    output: OutputConfig
    log: LogConfig
    defaults: DefaultsConfig


def load_config(config_path: Path | None = None, pages_path: Path | None = None) -> S2AConfig:
    """
    Load configuration from s2a.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/s2a.toml
    3. pages_path/s2a.toml

    Args:
        config_path: Explicit path to config file
        pages_path: Pages root for fallback search

    Returns:
        S2AConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILE)
    if pages_path:
        search_paths.append(pages_path / CONFIG_FILE)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    project_data = toml_data.get("project", {})
    project_config = ProjectConfig(name=project_data.get("name", "default"))

    pages_data = toml_data.get("pages", {})
    pages_config = PagesConfig(
        root=Path(pages_data.get("root", pages_path or Path("./pages")))
    )

    output_data = toml_data.get("output", {})
    output_config = OutputConfig(
        path=Path(output_data.get("path", f"{project_config.name}.json"))
    )

    log_data = toml_data.get("log", {})
    log_config = LogConfig(level=str(log_data.get("level", "WARNING")).upper())

    deck_data = toml_data.get("defaults", {}).get("deck", {})
    defaults_config = DefaultsConfig(
        deck=Deck(
            id=deck_data.get("id", DEFAULT_DECK.id),
            name=deck_data.get("name", DEFAULT_DECK.name),
        )
    )

    return S2AConfig(
        project=project_config,
        pages=pages_config,
        output=output_config,
        log=log_config,
        defaults=defaults_config,
    )
