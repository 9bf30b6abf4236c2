"""Template transforms applied before compiling a cache loader."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable, Sequence

from ngcache.builder.base import TemplateFile
from ngcache.transforms.base import (
    Transform,
    TransformFactory,
    TransformNotFoundError,
    TransformStage,
)
from ngcache.transforms.builtin import CollapseWhitespaceTransform, StripCommentsTransform

__all__ = [
    "Transform",
    "TransformFactory",
    "TransformNotFoundError",
    "TransformStage",
    "CollapseWhitespaceTransform",
    "StripCommentsTransform",
    "TRANSFORMS",
    "chain",
    "get_transform_names",
    "load_transform",
    "load_transforms",
]

logger = logging.getLogger(__name__)

# Transform registry: name -> transform class
TRANSFORMS: dict[str, type[Transform]] = {
    "collapse-whitespace": CollapseWhitespaceTransform,
    "strip-comments": StripCommentsTransform,
}


def get_transform_names() -> list[str]:
    """Get the names of all built-in transforms."""
    return sorted(TRANSFORMS.keys())


def load_transform(name: str) -> TransformFactory:
    """Resolve a transform factory by name.

    Args:
        name: A built-in transform name (e.g., "strip-comments") or an
            import path in ``package.module:attribute`` form.

    Raises:
        TransformNotFoundError: If the name cannot be resolved to a callable.
    """
    if name in TRANSFORMS:
        return TRANSFORMS[name]

    module_name, sep, attr = name.partition(":")
    if not sep or not module_name or not attr:
        raise TransformNotFoundError(
            f"Unknown transform: {name!r}. "
            f"Available: {', '.join(get_transform_names())}, or module:attribute"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise TransformNotFoundError(f"Cannot import transform module {module_name!r}: {e}") from e

    factory = getattr(module, attr, None)
    if not callable(factory):
        raise TransformNotFoundError(f"Transform {name!r} is not a callable")

    logger.debug("Loaded transform %s", name)
    return factory


def chain(factories: Sequence[TransformFactory]) -> TransformFactory | None:
    """Combine transform factories into one that applies them in order.

    Returns None when there are no factories.
    """
    if not factories:
        return None
    if len(factories) == 1:
        return factories[0]

    def create() -> TransformStage:
        stages = [factory() for factory in factories]

        def run(templates: Iterable[TemplateFile]) -> Iterable[TemplateFile]:
            for stage in stages:
                templates = stage(templates)
            return templates

        return run

    return create


def load_transforms(names: Iterable[str]) -> TransformFactory | None:
    """Resolve and chain transforms by name."""
    return chain([load_transform(name) for name in names])
