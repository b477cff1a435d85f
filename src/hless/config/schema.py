"""Pydantic models for configuration schema."""

from __future__ import annotations

import shlex
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from hless.core.color import parse_hex_color


class Config(BaseModel):
    """Top-level configuration.

    Keys are accepted in any case, so both ``foreground`` and the historic
    ``Foreground`` spelling load.
    """

    foreground: dict[str, str] = Field(
        default_factory=dict, description="Keyword to #RRGGBB foreground color"
    )
    background: dict[str, str] = Field(
        default_factory=dict, description="Keyword to #RRGGBB background color"
    )
    aliases: dict[str, str] = Field(
        default_factory=dict, description="Alias to canonical keyword"
    )
    pager: list[str] | None = Field(
        default=None, description="Pager command and arguments (default: less -n -R -)"
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Lowercase top-level keys, rejecting sections given twice."""
        if not isinstance(data, dict):
            return data

        normalized: dict[Any, Any] = {}
        for key, value in data.items():
            name = key.lower() if isinstance(key, str) else key
            if name in normalized:
                raise ValueError(f"section '{name}' given more than once")
            normalized[name] = value
        return normalized

    @field_validator("foreground", "background", "aliases", mode="before")
    @classmethod
    def empty_mapping(cls, v: dict[str, str] | None) -> dict[str, str]:
        """Treat an empty YAML section as an empty mapping."""
        return {} if v is None else v

    @field_validator("foreground", "background", mode="before")
    @classmethod
    def missing_colors(cls, v: Any) -> Any:
        """Name keywords whose color is empty.

        An unquoted ``#`` starts a YAML comment, so ``ERROR: #ff0000`` loads
        with no color at all.
        """
        if isinstance(v, dict):
            for keyword, color in v.items():
                if color is None:
                    raise ValueError(
                        f"no color for keyword '{keyword}' (quote hex colors in YAML: '#ff0000')"
                    )
        return v

    @field_validator("foreground", "background")
    @classmethod
    def check_colors(cls, v: dict[str, str]) -> dict[str, str]:
        """Reject anything that is not a #RRGGBB color."""
        for keyword, color in v.items():
            try:
                parse_hex_color(color)
            except ValueError as e:
                raise ValueError(f"{e} for keyword '{keyword}'") from e
        return v

    @field_validator("pager", mode="before")
    @classmethod
    def split_pager(cls, v: str | list[str] | None) -> list[str] | None:
        """Accept the pager as a single command string."""
        if isinstance(v, str):
            return shlex.split(v)
        return v

    def merge(self, other: Config) -> Config:
        """Overlay another configuration on this one."""
        return Config(
            foreground={**self.foreground, **other.foreground},
            background={**self.background, **other.background},
            aliases={**self.aliases, **other.aliases},
            pager=other.pager if other.pager is not None else self.pager,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.foreground or self.background or self.aliases)
