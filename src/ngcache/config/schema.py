"""Configuration schema and validation for ngcache."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Literal, cast

logger = logging.getLogger(__name__)

EolStyle = Literal["lf", "crlf", "native"]
EOL_STYLE_NAMES: tuple[str, ...] = ("lf", "crlf", "native")


def _coerce_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "on"}
    return bool(value)


@dataclass
class NgCacheConfig:
    """ngcache configuration schema.

    Fields correspond to `ngcache build` options. None values mean "not set"
    and are filled from lower-precedence layers or defaults.
    """

    # Cache loader settings
    file_name: str | None = None
    source_filter: str | None = None
    transforms: tuple[str, ...] | None = None

    # HTML rewrite settings
    add_include: bool | None = None
    replace_block: bool | None = None

    # Output settings
    eol: EolStyle | None = None
    quiet: bool | None = None
    parallel: int | None = None

    def merge(self, other: NgCacheConfig) -> NgCacheConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new NgCacheConfig instance.
        """
        return NgCacheConfig(
            **{
                f.name: (
                    getattr(other, f.name)
                    if getattr(other, f.name) is not None
                    else getattr(self, f.name)
                )
                for f in fields(self)
            }
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                result[f.name] = list(value)
            elif value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NgCacheConfig:
        """Create an NgCacheConfig from a dictionary.

        Unknown keys are ignored. Values are coerced to the field types.
        """
        file_name = data.get("file_name")
        source_filter = data.get("source_filter")

        transforms_raw = data.get("transforms")
        transforms: tuple[str, ...] | None = None
        if isinstance(transforms_raw, str):
            transforms = (transforms_raw,)
        elif isinstance(transforms_raw, list):
            transforms = tuple(str(t) for t in transforms_raw)

        eol_raw = data.get("eol")
        eol: EolStyle | None = None
        if isinstance(eol_raw, str) and eol_raw.lower() in EOL_STYLE_NAMES:
            eol = cast(EolStyle, eol_raw.lower())

        parallel_raw = data.get("parallel")
        parallel: int | None = None
        if parallel_raw is not None:
            try:
                parallel = int(parallel_raw)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid parallel value: %r", parallel_raw)

        return cls(
            file_name=str(file_name) if file_name is not None else None,
            source_filter=str(source_filter) if source_filter is not None else None,
            transforms=transforms,
            add_include=_coerce_bool(data.get("add_include")),
            replace_block=_coerce_bool(data.get("replace_block")),
            eol=eol,
            quiet=_coerce_bool(data.get("quiet")),
            parallel=parallel,
        )


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = NgCacheConfig(
    file_name="templates.js",
    source_filter="**/*.template.html",
    transforms=(),
    add_include=True,
    replace_block=False,
    eol="native",
    quiet=False,
    parallel=1,
)
