"""Stateless request cycle.

Nothing is kept between requests. Every request builds a fresh page
from its query string; listener requests then locate the component and
behavior named by the listener parameter and run it against that page::

    cycle = RequestCycle(CounterPage)
    cycle.handle("")                                       # full page
    cycle.handle("counter=1&_perch_listener=link:0")       # ajax JSON
    cycle.handle("counter=1&_perch_listener=link:0", ajax=False)  # fallback page
"""

import logging
from dataclasses import dataclass

from perch.ajax.behavior import AbstractAjaxBehavior
from perch.ajax.target import AjaxRequestTarget
from perch.components.component import Component
from perch.components.page import Page
from perch.config import RenderConfig
from perch.context import config_var
from perch.errors import ListenerNotFound, ListenerRejected
from perch.params import PageParameters

logger = logging.getLogger("perch.request")


@dataclass(frozen=True, slots=True)
class Response:
    """A rendered response body with its content type."""

    body: str
    content_type: str = "text/html; charset=utf-8"
    status: int = 200

    @property
    def text(self) -> str:
        return self.body


class RequestCycle:
    """Builds a page per request and dispatches listener calls to it."""

    def __init__(self, page_class: type[Page], config: RenderConfig | None = None) -> None:
        self.page_class = page_class
        self.config = config or RenderConfig()
        self.config.validate()

    def handle(self, query_string: str | bytes = "", *, ajax: bool = True) -> Response:
        """Handle one request.

        Args:
            query_string: Raw query string; carries the page parameters
                and, for listener requests, the listener parameter.
            ajax: False for a fallback (non-JavaScript) listener request;
                the listener runs with ``target=None`` and the whole page
                is rendered afterwards.

        Raises:
            ListenerNotFound: The listener names no component or no ajax behavior.
            ListenerRejected: The page is not stateless or the component is disabled.
        """
        params = PageParameters.from_query_string(query_string)
        listener = params.get(self.config.listener_param)
        params.remove(self.config.listener_param)

        token = config_var.set(self.config)
        try:
            page = self.page_class(params)
            if listener is None:
                return self._page_response(page)

            component, behavior = self.resolve_listener(page, listener)
            if not page.is_stateless():
                raise ListenerRejected(listener, "page is not stateless")
            if not component.is_enabled_in_hierarchy() or not behavior.is_enabled(component):
                raise ListenerRejected(listener, "component is disabled")

            logger.debug("dispatching %s to %r (ajax=%s)", listener, behavior, ajax)
            if not ajax:
                behavior.on_request(None)
                return self._page_response(page)

            target = AjaxRequestTarget(page)
            behavior.on_request(target)
            return Response(
                body=target.render().to_json(),
                content_type="application/json",
            )
        finally:
            config_var.reset(token)

    def resolve_listener(
        self, page: Page, listener: str
    ) -> tuple[Component, AbstractAjaxBehavior]:
        """Split ``path:index`` and return the component and its ajax behavior."""
        path, _, index = listener.rpartition(":")
        if not path or not index.isdigit():
            raise ListenerNotFound(listener, "expected 'component-path:behavior-index'")
        component = page.find_component(path)
        if component is None:
            raise ListenerNotFound(listener, f"no component at {path!r}")
        behaviors = component.behaviors
        position = int(index)
        if position >= len(behaviors):
            raise ListenerNotFound(listener, f"{component!r} has no behavior {position}")
        behavior = behaviors[position]
        if not isinstance(behavior, AbstractAjaxBehavior):
            raise ListenerNotFound(listener, f"{behavior!r} does not accept requests")
        return component, behavior

    def _page_response(self, page: Page) -> Response:
        return Response(body=page.render())
