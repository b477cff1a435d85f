"""Core functionality: color sequences, formatter, and pager pipeline."""

from hless.core.color import RESET, Layer, build_color_table, parse_hex_color, true_color_sequence
from hless.core.formatter import Formatter, compile_keyword_pattern
from hless.core.pipeline import DEFAULT_PAGER, PagerError, PipelineRunner, ignore_interrupt

__all__ = [
    "RESET",
    "Layer",
    "build_color_table",
    "parse_hex_color",
    "true_color_sequence",
    "Formatter",
    "compile_keyword_pattern",
    "DEFAULT_PAGER",
    "PagerError",
    "PipelineRunner",
    "ignore_interrupt",
]
