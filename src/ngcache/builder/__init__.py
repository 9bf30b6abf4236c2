"""Cache loader script generation."""

from ngcache.builder.artifact import ArtifactBuilder
from ngcache.builder.base import (
    BuildError,
    GeneratedArtifact,
    NoTemplatesFoundError,
    TemplateFile,
)
from ngcache.builder.collector import (
    DEFAULT_SOURCE_FILTER,
    collect_templates,
    enumerate_files,
    matches_filter,
)
from ngcache.builder.compiler import CompiledScript, compile_template_cache
from ngcache.builder.eol import normalize_eol, resolve_eol

__all__ = [
    "ArtifactBuilder",
    "BuildError",
    "CompiledScript",
    "DEFAULT_SOURCE_FILTER",
    "GeneratedArtifact",
    "NoTemplatesFoundError",
    "TemplateFile",
    "collect_templates",
    "compile_template_cache",
    "enumerate_files",
    "matches_filter",
    "normalize_eol",
    "resolve_eol",
]
