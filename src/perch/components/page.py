"""Page — root of a component tree for one rendering pass."""

import logging
from typing import TYPE_CHECKING, ClassVar

from perch.ajax.registry import DelegatedEvents
from perch.components.component import Component, Container
from perch.config import RenderConfig
from perch.context import get_config
from perch.head import HeaderResponse
from perch.params import PageParameters
from perch.rendering import Renderer, get_renderer

if TYPE_CHECKING:
    from perch.ajax.behavior import Behavior

logger = logging.getLogger("perch.request")


class Page(Container):
    """Root container. Owns page parameters and the delegated event registry.

    Subclasses build their tree in ``__init__``::

        class Hello(Page):
            def __init__(self, params=None):
                super().__init__(params)
                self.add(Label("greeting", "Hello"))

    The configuration comes from the active ``RequestCycle`` unless one
    is passed explicitly.
    """

    mount_path: ClassVar[str] = "/"
    title: ClassVar[str | None] = None

    def __init__(
        self,
        params: PageParameters | None = None,
        *,
        config: RenderConfig | None = None,
    ) -> None:
        super().__init__("page")
        self.config = config or get_config()
        self.config.validate()
        self.params = params if params is not None else PageParameters()
        self.delegated_events = DelegatedEvents()
        self._stateless_hint = False

    @property
    def renderer(self) -> Renderer:
        return get_renderer(self.config)

    @property
    def path(self) -> str:
        return ""

    def find_page(self) -> "Page":
        return self

    def set_stateless_hint(self, flag: bool) -> "Page":
        self._stateless_hint = flag
        return self

    def is_stateless(self) -> bool:
        """True when the page and every component in it can be rebuilt per request."""
        if not self._stateless_hint:
            return False
        return all(component.is_stateless() for component in self.visit())

    def find_component(self, path: str) -> Component | None:
        """Look up a descendant by its colon-separated path."""
        if not path:
            return None
        cursor: Component | None = self
        for part in path.split(":"):
            if not isinstance(cursor, Container):
                return None
            cursor = cursor.get(part)
            if cursor is None:
                return None
        return cursor

    # -- URLs --

    def url(self, params: PageParameters | None = None) -> str:
        """This page's URL carrying *params* (default: the current page parameters)."""
        query = (params if params is not None else self.params).to_query_string()
        return f"{self.mount_path}?{query}" if query else self.mount_path

    def listener_url(self, component: Component, behavior: "Behavior") -> str:
        """URL that dispatches a request to *behavior* on *component*.

        Stateless: the current page parameters travel along so the page
        can be rebuilt before the listener runs.
        """
        params = self.params.copy()
        params.set(
            self.config.listener_param,
            f"{component.path}:{component.behavior_index(behavior)}",
        )
        return self.url(params)

    # -- Rendering --

    def render_head_response(self) -> HeaderResponse:
        response = HeaderResponse()
        self.render_head(response)
        return response

    def render(self) -> str:  # type: ignore[override]
        """Render the full HTML document: body first, then the head it needs."""
        body = self.render_body()
        response = self.render_head_response()
        logger.debug(
            "rendered %s (%d header items, stateless=%s)",
            type(self).__name__,
            len(response),
            self.is_stateless(),
        )
        return self.renderer.render_document(
            title=self.title or self.config.title,
            head=self.renderer.render_head(response),
            body=body,
        )
