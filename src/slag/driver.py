"""Conversion pipeline: brace-free source -> punctuated Rust."""

from __future__ import annotations

import io
from pathlib import Path

from slag.config import SlagConfig
from slag.emitter import Emitter
from slag.layout import LayoutEngine
from slag.lexer import Lexer
from slag.log import get_logger
from slag.source import SourceFile
from slag.trees import build_token_trees

logger = get_logger(__name__)


def convert_source(source: SourceFile, config: SlagConfig | None = None) -> str:
    """Run lex -> tree building -> layout over *source*.

    Raises CompileError (or its LayoutError subclass) on the first failing
    stage; nothing is returned in that case.
    """
    config = config or SlagConfig()
    tokens = Lexer(source).lex()
    trees = build_token_trees(tokens, source)
    out = io.StringIO()
    emitter = Emitter(out, preserve_blank_lines=config.layout.preserve_blank_lines)
    LayoutEngine(source, emitter, config.layout).synthesize(trees)
    emitter.finish()
    return out.getvalue()


def convert(text: str, filename: str = "<stdin>", config: SlagConfig | None = None) -> str:
    return convert_source(SourceFile(text, filename), config)


def default_output_path(source: Path, extension: str = ".rs") -> Path:
    """``foo.slag`` -> ``foo.slag.rs``."""
    return source.with_name(source.name + extension)


def convert_file(
    source: Path, dest: Path | None = None, config: SlagConfig | None = None,
) -> Path:
    """Convert *source* and write the result. Returns the written path.

    The output file is only created once the whole conversion succeeded.
    """
    config = config or SlagConfig()
    dest = dest or default_output_path(source, config.output.extension)
    result = convert_source(SourceFile.from_path(source), config)
    dest.write_text(result)
    logger.info("wrote %s", dest)
    return dest
