"""Behaviors — reusable units attached to components.

``Behavior`` is the plain hook set the component tree calls into.
``AbstractAjaxBehavior`` adds what every ajax behavior shares: a
callback URL that reaches it through the stateless listener parameter,
the serialized request attributes, and the client runtime header item.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from perch.ajax.attributes import AjaxRequestAttributes
from perch.ajax.runtime import RUNTIME_JS, RUNTIME_TOKEN
from perch.errors import ComponentTreeError, InvalidArgument
from perch.head import HeaderResponse, JavaScriptHeaderItem

if TYPE_CHECKING:
    from perch.ajax.target import AjaxRequestTarget
    from perch.components.component import Component
    from perch.components.page import Page


class Behavior:
    """Base behavior. Binds to at most one component."""

    def __init__(self) -> None:
        self._component: Component | None = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"

    @property
    def component(self) -> "Component":
        if self._component is None:
            msg = f"{self!r} is not bound to a component"
            raise ComponentTreeError(msg)
        return self._component

    def bind(self, component: "Component") -> None:
        if self._component is not None:
            msg = f"{self!r} is already bound to {self._component!r}"
            raise InvalidArgument(msg)
        self._component = component

    def unbind(self, component: "Component") -> None:
        self._component = None

    def on_page_attached(self, component: "Component", page: "Page") -> None:
        """The component (with this behavior) became part of *page*."""

    def on_page_detached(self, component: "Component", page: "Page") -> None:
        """The component (with this behavior) left *page*."""

    def on_component_tag(self, component: "Component", attributes: dict[str, Any]) -> None:
        pass

    def render_head(self, component: "Component", response: HeaderResponse) -> None:
        pass

    def after_children_head(self, component: "Component", response: HeaderResponse) -> None:
        """Called after the component's descendants finished their head pass."""

    def is_enabled(self, component: "Component") -> bool:
        return True

    def stateless_hint(self, component: "Component") -> bool:
        return True


class AbstractAjaxBehavior(Behavior):
    """An ajax behavior reachable through a listener URL.

    Args:
        stateless: Whether a page rebuilt from its parameters can serve
            this behavior's requests. Stateless dispatch refuses pages
            holding behaviors that say otherwise.
    """

    def __init__(self, *, stateless: bool = False) -> None:
        super().__init__()
        self._stateless = stateless

    def bind(self, component: "Component") -> None:
        super().bind(component)
        component.output_markup_id = True

    def stateless_hint(self, component: "Component") -> bool:
        return self._stateless

    def get_callback_url(self, component: "Component") -> str:
        return component.page.listener_url(component, self)

    def update_ajax_attributes(self, attributes: AjaxRequestAttributes) -> None:
        """Hook for subclasses to adjust the request attributes."""

    def get_attributes(self, component: "Component") -> AjaxRequestAttributes:
        attributes = AjaxRequestAttributes(
            callback_url=self.get_callback_url(component),
            markup_id=component.markup_id,
        )
        self.update_ajax_attributes(attributes)
        return attributes

    def render_ajax_attributes(self, component: "Component") -> str:
        """The serialized listener configuration for *component*."""
        pretty = component.page.config.debug
        return self.get_attributes(component).to_json(pretty=pretty)

    def get_callback_script(self, component: "Component") -> str:
        return f"Perch.Ajax.ajax({self.render_ajax_attributes(component)});"

    def render_head(self, component: "Component", response: HeaderResponse) -> None:
        if component.page.config.runtime_script:
            response.render(JavaScriptHeaderItem.for_script(RUNTIME_JS, token=RUNTIME_TOKEN))

    def on_request(self, target: "AjaxRequestTarget | None") -> None:
        """Entry point for a listener request. *target* is None for a fallback (non-ajax) request."""
        self.respond(target)

    def respond(self, target: "AjaxRequestTarget | None") -> None:
        raise NotImplementedError


def call_handler(
    handler: Callable[..., Any] | None,
    owner: object,
    name: str,
    *args: Any,
) -> None:
    """Invoke a callback passed at construction, or fail like an unimplemented override."""
    if handler is None:
        msg = f"{type(owner).__name__} needs a {name} callback or an override of {name}()"
        raise NotImplementedError(msg)
    handler(*args)
