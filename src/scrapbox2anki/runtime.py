"""Runtime wiring helper for the CLI."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_pages import FsPageSource
from .adapters.json_bundle import JsonBundleBuilder
from .adapters.scrapbox_parser import ScrapboxParser
from .config import S2AConfig, load_config
from .resolve import ResolutionCache


@dataclass
class Runtime:
    """Container for all wired components."""
    project: str
    source: FsPageSource
    tokenizer: ScrapboxParser
    cache: ResolutionCache
    builder: JsonBundleBuilder
    config: S2AConfig


def build_runtime(
    pages_root: Path | None = None,
    config_path: Path | None = None,
    project: str | None = None,
) -> Runtime:
    """Build and wire all components for one conversion run."""
    config = load_config(config_path=config_path, pages_path=pages_root)

    # CLI args win over the config file
    if pages_root is None:
        pages_root = config.pages.root
    if project is None:
        project = config.project.name

    source = FsPageSource(pages_root)
    tokenizer = ScrapboxParser()
    cache = ResolutionCache(source, tokenizer, default_deck=config.defaults.deck)

    return Runtime(
        project=project,
        source=source,
        tokenizer=tokenizer,
        cache=cache,
        builder=JsonBundleBuilder(),
        config=config,
    )
