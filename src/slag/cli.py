"""slag command line interface."""

from __future__ import annotations

from pathlib import Path

import click

from slag import __version__
from slag.config import MarkerPolicy, discover_config, load_config
from slag.driver import convert_source, default_output_path
from slag.errors import CompileError, DiagnosticRenderer
from slag.log import configure_logging, get_logger
from slag.source import SourceFile

logger = get_logger(__name__)


@click.command()
@click.version_option(__version__, prog_name="slag")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o", "--output", type=click.Path(dir_okay=False), default=None,
    help="The output file to emit source to (default: SOURCE.rs).",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Write the result to stdout.")
@click.option(
    "--marker", type=click.Choice([p.value for p in MarkerPolicy]), default=None,
    help="Keep `=>` always, or only on selector arms.",
)
@click.option(
    "--config", "config_path", type=click.Path(exists=True, dir_okay=False),
    default=None, help="Use this slag.toml instead of searching for one.",
)
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug).")
def main(
    source: str,
    output: str | None,
    to_stdout: bool,
    marker: str | None,
    config_path: str | None,
    verbose: int,
) -> None:
    """Add braces and semicolons to indentation-structured Rust source."""
    configure_logging(verbose)
    source_path = Path(source)

    try:
        if config_path:
            config = load_config(Path(config_path))
        else:
            config = discover_config(source_path)
    except ValueError as e:
        click.echo(f"error: invalid config: {e}", err=True)
        raise SystemExit(1)
    if marker:
        config.layout.marker = MarkerPolicy(marker)

    src = SourceFile.from_path(source_path)
    try:
        result = convert_source(src, config)
    except CompileError as e:
        renderer = DiagnosticRenderer(color=True)
        renderer.add_source(src)
        for diag in e.diagnostics:
            click.echo(renderer.render(diag), err=True)
        raise SystemExit(1)

    if to_stdout:
        click.echo(result, nl=False)
        return

    dest = Path(output) if output else default_output_path(
        source_path, config.output.extension,
    )
    dest.write_text(result)
    logger.info("converted %s", source_path)
    click.echo(f"wrote {dest}")
