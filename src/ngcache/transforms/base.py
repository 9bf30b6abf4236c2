"""Base template transform interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator

from ngcache.builder.base import TemplateFile

# A transform stage maps templates to templates; a factory creates a fresh
# stage for each cache loader build.
TransformStage = Callable[[Iterable[TemplateFile]], Iterable[TemplateFile]]
TransformFactory = Callable[[], TransformStage]


class TransformNotFoundError(Exception):
    """Raised when a transform name cannot be resolved."""


class Transform(ABC):
    """Base class for template transforms.

    Subclasses are transform factories: instantiating one yields a stage
    that can be called with the templates of a single build.
    """

    name: str

    @abstractmethod
    def transform(self, template: TemplateFile) -> TemplateFile | None:
        """Transform a single template.

        Returns:
            The transformed template, or None to drop it from the build.
        """
        ...

    def transform_all(self, templates: Iterable[TemplateFile]) -> Iterator[TemplateFile]:
        """Transform templates one at a time, skipping dropped ones.

        Override for transforms that need to see every template.
        """
        for template in templates:
            result = self.transform(template)
            if result is not None:
                yield result

    def __call__(self, templates: Iterable[TemplateFile]) -> Iterator[TemplateFile]:
        return self.transform_all(templates)
