"""Keyword matching and colorizing of individual lines."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from hless.core.color import RESET, build_color_table

if TYPE_CHECKING:
    from hless.config.schema import Config

logger = logging.getLogger(__name__)


def compile_keyword_pattern(keywords: set[str]) -> re.Pattern[str] | None:
    """Compile one alternation matching any of the keywords literally.

    Longer keywords are tried first so a keyword that is a prefix of another
    does not shadow it at the same position.

    Returns:
        Compiled pattern, or None when there are no (non-empty) keywords
    """
    ordered = sorted((k for k in keywords if k), key=lambda k: (-len(k), k))
    if not ordered:
        return None
    return re.compile("|".join(re.escape(k) for k in ordered))


class Formatter:
    """Recolors configured keywords in a line of text.

    The color and alias tables are read-only after construction, so a single
    instance can be shared by whatever thread does the formatting.
    """

    def __init__(
        self,
        colors: Mapping[str, str] | None = None,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize formatter.

        Args:
            colors: Keyword to escape sequence (already resolved)
            aliases: Alias to canonical keyword
        """
        self._colors = MappingProxyType(dict(colors or {}))
        self._aliases = MappingProxyType(dict(aliases or {}))
        self._pattern = compile_keyword_pattern(set(self._colors) | set(self._aliases))

        logger.debug(
            "Formatter ready: %d colored keywords, %d aliases",
            len(self._colors),
            len(self._aliases),
        )

    @classmethod
    def from_mappings(
        cls,
        foreground: Mapping[str, str] | None = None,
        background: Mapping[str, str] | None = None,
        aliases: Mapping[str, str] | None = None,
    ) -> Formatter:
        """Build a formatter from hex color mappings.

        Raises:
            ValueError: If any color is not a ``#RRGGBB`` string
        """
        return cls(build_color_table(foreground, background), aliases)

    @classmethod
    def from_config(cls, config: Config) -> Formatter:
        """Build a formatter from a loaded configuration."""
        return cls.from_mappings(config.foreground, config.background, config.aliases)

    @classmethod
    def identity(cls) -> Formatter:
        """Formatter that leaves every line unchanged."""
        return cls()

    @property
    def active(self) -> bool:
        """Whether there is anything to match."""
        return self._pattern is not None

    @property
    def colors(self) -> Mapping[str, str]:
        return self._colors

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    @property
    def keywords(self) -> tuple[str, ...]:
        """All names the formatter can match, sorted."""
        return tuple(sorted(set(self._colors) | set(self._aliases)))

    def format(self, line: str) -> str:
        """Colorize every keyword occurrence in a line.

        Matches are found left to right without overlap, and replaced text is
        not scanned again.

        Args:
            line: Line of text without its terminator

        Returns:
            The line with keywords wrapped in their color sequences
        """
        if self._pattern is None:
            return line
        return self._pattern.sub(self._replace, line)

    def _replace(self, match: re.Match[str]) -> str:
        name = match.group(0)
        # One hop only
        name = self._aliases.get(name, name)

        color = self._colors.get(name)
        if color is None:
            return name
        return f"{color}{name}{RESET}"

    def __repr__(self) -> str:
        return f"Formatter(keywords={len(self.keywords)}, active={self.active})"
