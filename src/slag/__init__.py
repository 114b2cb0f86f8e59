"""Layout-to-punctuation synthesizer for brace-free Rust source."""

__version__ = "0.1.0"
