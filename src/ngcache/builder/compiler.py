"""Compiles template files into a ``$templateCache`` preload script."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ngcache.builder.base import TemplateFile

TemplateKey = Callable[[TemplateFile], str]

TEMPLATE_BODY = '$templateCache.put("{url}","{contents}");'
MODULE_HEADER = (
    'angular.module("{module}").run(["$templateCache", function($templateCache) {{\n'
)
MODULE_FOOTER = "\n}]);"

_JS_ESCAPES = str.maketrans(
    {
        '"': '\\"',
        "'": "\\'",
        "\\": "\\\\",
        "\n": "\\n",
        "\r": "\\r",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


@dataclass(frozen=True)
class CompiledScript:
    """Output of the template cache compiler."""

    file_name: str
    contents: str


def escape_js_string(value: str) -> str:
    """Escape a value for use inside a quoted JavaScript string literal."""
    return value.translate(_JS_ESCAPES)


def module_header(module: str) -> str:
    """Header opening the run block of an AngularJS module."""
    return MODULE_HEADER.format(module=escape_js_string(module))


def default_key(template: TemplateFile) -> str:
    return template.template_id


def compile_template_cache(
    templates: Iterable[TemplateFile],
    file_name: str,
    *,
    key: TemplateKey = default_key,
    header: str = "",
    footer: str = "",
) -> CompiledScript | None:
    """Build a script registering each template in ``$templateCache``.

    Registrations are ordered by key so output does not depend on discovery
    order.

    Args:
        templates: Templates to register.
        file_name: Name of the script file being produced.
        key: Returns the cache URL for a template.
        header: Text placed before the registrations.
        footer: Text placed after the registrations.

    Returns:
        The compiled script, or None if `templates` was empty.
    """
    entries = sorted((key(t), t.contents) for t in templates)
    if not entries:
        return None

    body = "\n".join(
        TEMPLATE_BODY.format(
            url=escape_js_string(url), contents=escape_js_string(contents)
        )
        for url, contents in entries
    )
    return CompiledScript(file_name=file_name, contents=f"{header}{body}{footer}")
