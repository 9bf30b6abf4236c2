"""ngcache - AngularJS template cache loader builder.

Scans HTML pages for ``templates:build`` comment blocks and builds the
``$templateCache`` preload scripts they declare.
"""

import logging

__version__ = "0.1.0"

from ngcache.builder.base import BuildError, NoTemplatesFoundError  # noqa: E402
from ngcache.directives.base import (  # noqa: E402
    DirectiveError,
    MalformedDirectiveError,
    MissingModuleError,
)
from ngcache.transforms.base import TransformNotFoundError  # noqa: E402

__all__ = [
    "BuildError",
    "DirectiveError",
    "MalformedDirectiveError",
    "MissingModuleError",
    "NoTemplatesFoundError",
    "TransformNotFoundError",
    "__version__",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
