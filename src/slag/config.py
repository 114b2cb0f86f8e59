"""TOML config loading for slag.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

CONFIG_NAME = "slag.toml"


class MarkerPolicy(Enum):
    """When the ``=>`` block-open marker is kept in the output."""

    ALWAYS = "always"
    SELECTOR = "selector"


@dataclass
class LayoutConfig:
    selector_keywords: frozenset[str] = frozenset({"match"})
    aggregate_keywords: frozenset[str] = frozenset({"struct", "enum"})
    marker: MarkerPolicy = MarkerPolicy.ALWAYS
    preserve_blank_lines: bool = False


@dataclass
class OutputConfig:
    extension: str = ".rs"


@dataclass
class SlagConfig:
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find slag.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def parse_marker(value: str) -> MarkerPolicy:
    try:
        return MarkerPolicy(value)
    except ValueError:
        choices = ", ".join(p.value for p in MarkerPolicy)
        raise ValueError(f"invalid marker policy {value!r} (expected one of: {choices})")


def load_config(path: Path) -> SlagConfig:
    """Parse a slag.toml file into a SlagConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = SlagConfig()

    if "layout" in data:
        lay = data["layout"]
        defaults = LayoutConfig()
        config.layout = LayoutConfig(
            selector_keywords=frozenset(
                lay.get("selector_keywords", defaults.selector_keywords)
            ),
            aggregate_keywords=frozenset(
                lay.get("aggregate_keywords", defaults.aggregate_keywords)
            ),
            marker=parse_marker(lay.get("marker", defaults.marker.value)),
            preserve_blank_lines=lay.get("preserve_blank_lines", False),
        )

    if "output" in data:
        out = data["output"]
        config.output = OutputConfig(
            extension=out.get("extension", ".rs"),
        )

    return config


def discover_config(start_path: Path | None = None) -> SlagConfig:
    """Load the nearest slag.toml, or the defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return SlagConfig()
