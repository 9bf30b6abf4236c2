"""Built-in template transforms."""

from __future__ import annotations

import re

from ngcache.builder.base import TemplateFile
from ngcache.transforms.base import Transform

_BETWEEN_TAGS = re.compile(r">\s+<")
_HTML_COMMENT = re.compile(r"<!--(?!\[if).*?-->", re.DOTALL)


class CollapseWhitespaceTransform(Transform):
    """Trim every line and drop whitespace between tags."""

    name = "collapse-whitespace"

    def transform(self, template: TemplateFile) -> TemplateFile:
        lines = (line.strip() for line in template.contents.splitlines())
        collapsed = " ".join(line for line in lines if line)
        return template.with_contents(_BETWEEN_TAGS.sub("><", collapsed))


class StripCommentsTransform(Transform):
    """Remove HTML comments, keeping conditional comments."""

    name = "strip-comments"

    def transform(self, template: TemplateFile) -> TemplateFile:
        return template.with_contents(_HTML_COMMENT.sub("", template.contents))
