"""Kida environment and the templates perch renders with.

Components render fixed inline templates; the ``Renderer`` compiles each
source once per configuration and reuses it for every page built with
that configuration.
"""

import html
import threading
from functools import lru_cache
from typing import Any

from kida import Environment
from kida.template import Markup

from perch.config import RenderConfig
from perch.head import HeaderResponse


def attrs(mapping: dict[str, Any] | None) -> Markup:
    """Render a tag attribute mapping as `` name="value"`` pairs.

    ``None`` and ``False`` values are dropped; ``True`` renders a bare
    attribute.

    Example:
        <a{{ {"id": "id-link", "href": "?x=1", "disabled": False} | attrs }}>
        → <a id="id-link" href="?x=1">
    """
    if not mapping:
        return Markup("")
    parts = []
    for name, value in mapping.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(str(value))}"')
    return Markup("".join(parts))


def create_environment(config: RenderConfig) -> Environment:
    """Create a kida Environment for *config* with perch's filters registered."""
    env = Environment(autoescape=config.autoescape)
    env.update_filters({"attrs": attrs})
    return env


HEAD_TEMPLATE = """\
{% for script in javascript %}<script>{{ script }}</script>
{% endfor %}{% if dom_ready %}<script>Perch.Event.domReady(function(){
{{ dom_ready }}
});</script>
{% endif %}"""

DOCUMENT_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
{{ head }}</head>
<body{{ attrs | attrs }}>
{{ body }}
</body>
</html>
"""


class Renderer:
    """Compiles and caches inline templates for one configuration."""

    __slots__ = ("_lock", "_templates", "config", "env")

    def __init__(self, config: RenderConfig) -> None:
        self.config = config
        self.env = create_environment(config)
        self._templates: dict[str, Any] = {}
        self._lock = threading.Lock()

    def render(self, source: str, context: dict[str, Any]) -> Markup:
        template = self._templates.get(source)
        if template is None:
            with self._lock:
                template = self._templates.get(source)
                if template is None:
                    template = self.env.from_string(source)
                    self._templates[source] = template
        return Markup(template.render(context))

    def render_head(self, response: HeaderResponse) -> Markup:
        """Render collected header items as ``<script>`` tags."""
        return self.render(
            HEAD_TEMPLATE,
            {
                "javascript": [Markup(script) for script in response.javascript],
                "dom_ready": Markup("\n".join(response.dom_ready)),
            },
        )

    def render_document(
        self,
        *,
        title: str,
        head: Markup,
        body: Markup,
        body_attrs: dict[str, Any] | None = None,
    ) -> str:
        return str(
            self.render(
                DOCUMENT_TEMPLATE,
                {"title": title, "head": head, "body": body, "attrs": body_attrs or {}},
            )
        )


@lru_cache(maxsize=8)
def get_renderer(config: RenderConfig) -> Renderer:
    """Return the shared renderer for *config* (configs are frozen, so hashable)."""
    return Renderer(config)
