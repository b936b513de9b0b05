"""Ajax event behaviors and event delegation.

An ``AjaxEventBehavior`` is linked to one client-side event (``click``,
``change``, ``keydown``...) of the component it is attached to::

    link.add_behavior(AjaxEventBehavior("click", on_event=lambda target: ...))

Every time the event fires in the browser, the behavior's
``on_event(target)`` runs on the server.

Rendering one listener per component is wasteful when many components
share an event inside one container (rows of a table, items of a list).
An ``EventDelegatingBehavior`` on the container fixes that: descendants
with an ajax behavior for the same event hand it their serialized
attributes instead of rendering their own script, and the container
renders a single delegated listener for all of them.

``resolve_and_render`` is the decision between the two.
"""

import enum
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from perch.ajax.attributes import AjaxRequestAttributes, script_json
from perch.ajax.behavior import AbstractAjaxBehavior, Behavior, call_handler
from perch.ajax.runtime import RUNTIME_JS, RUNTIME_TOKEN
from perch.components.component import Component, Container
from perch.components.page import Page
from perch.errors import InvalidArgument
from perch.head import HeaderResponse, JavaScriptHeaderItem, OnDomReadyHeaderItem

if TYPE_CHECKING:
    from perch.ajax.target import AjaxRequestTarget

logger = logging.getLogger("perch.ajax")


def normalize_event(event: str | None) -> str:
    """Lower-case *event* and strip a leading ``on`` (``"onClick"`` → ``"click"``)."""
    if not event:
        raise InvalidArgument("event must not be empty")
    event = event.lower()
    if event.startswith("on"):
        event = event[2:]
    if not event:
        raise InvalidArgument("event must name something after the 'on' prefix")
    return event


class Resolution(enum.Enum):
    """How an ajax event behavior was wired during one head pass."""

    SKIPPED = "skipped"  # component disabled in hierarchy
    DELEGATED = "delegated"
    DIRECT = "direct"


class AjaxEventBehavior(AbstractAjaxBehavior):
    """An ajax behavior attached to a client-side event of its component.

    Args:
        event: Event name. Case-insensitive; a leading ``on`` is dropped.
        on_event: Optional callback used instead of overriding ``on_event``.
        stateless: See ``AbstractAjaxBehavior``.

    Raises:
        InvalidArgument: *event* is empty, or ``on_check_event`` rejects it.
    """

    def __init__(
        self,
        event: str,
        *,
        on_event: Callable[["AjaxRequestTarget | None"], Any] | None = None,
        stateless: bool = False,
    ) -> None:
        super().__init__(stateless=stateless)
        if not event:
            raise InvalidArgument("event must not be empty")
        self.on_check_event(event)
        self._event = normalize_event(event)
        self._on_event = on_event

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._event!r}>"

    @property
    def event(self) -> str:
        return self._event

    def on_check_event(self, event: str) -> None:
        """Hook to reject events this behavior cannot handle. Raise ``InvalidArgument``."""

    def update_ajax_attributes(self, attributes: AjaxRequestAttributes) -> None:
        super().update_ajax_attributes(attributes)
        attributes.set_event_names(self._event)

    def render_head(self, component: Component, response: HeaderResponse) -> None:
        super().render_head(component, response)
        resolve_and_render(component, self, response)

    def respond(self, target: "AjaxRequestTarget | None") -> None:
        self.on_event(target)

    def on_event(self, target: "AjaxRequestTarget | None") -> None:
        """Listener for the ajax event."""
        call_handler(self._on_event, self, "on_event", target)


class EventDelegatingBehavior(Behavior):
    """One delegated listener on a container for every descendant sharing its event.

    Registers its event with the page's ``DelegatedEvents`` while its
    container is part of a page. During a head pass, descendants'
    ``AjaxEventBehavior`` instances call ``contribute_component_attributes``;
    once the container's subtree is done, a single DOM-ready script binds
    all of them.
    """

    def __init__(self, event: str) -> None:
        super().__init__()
        self._event = normalize_event(event)
        self._contributions: dict[str, str] = {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._event!r}>"

    @property
    def event(self) -> str:
        return self._event

    @property
    def contributions(self) -> dict[str, str]:
        """Markup id -> serialized attributes collected in the current pass."""
        return dict(self._contributions)

    def bind(self, component: Component) -> None:
        if not isinstance(component, Container):
            msg = f"{type(self).__name__} needs a container, got {component!r}"
            raise InvalidArgument(msg)
        super().bind(component)
        component.output_markup_id = True

    def on_page_attached(self, component: Component, page: Page) -> None:
        page.delegated_events.register(self._event)

    def on_page_detached(self, component: Component, page: Page) -> None:
        page.delegated_events.unregister(self._event)

    def contribute_component_attributes(self, markup_id: str, attributes: str) -> None:
        self._contributions[markup_id] = attributes

    def render_head(self, component: Component, response: HeaderResponse) -> None:
        self._contributions.clear()

    def after_children_head(self, component: Component, response: HeaderResponse) -> None:
        if not self._contributions:
            return
        if component.page.config.runtime_script:
            response.render(JavaScriptHeaderItem.for_script(RUNTIME_JS, token=RUNTIME_TOKEN))
        response.render(
            OnDomReadyHeaderItem.for_script(
                self.get_delegation_script(component),
                token=f"perch-delegate:{component.markup_id}:{self._event}",
            )
        )
        self._contributions.clear()

    def get_delegation_script(self, component: Component) -> str:
        entries = ",".join(
            f"{script_json(markup_id)}:{attributes}"
            for markup_id, attributes in self._contributions.items()
        )
        return (
            f"Perch.Ajax.delegate({script_json(component.markup_id)},"
            f"{script_json(self._event)},{{{entries}}});"
        )


def find_delegating_behavior(component: Component, event: str) -> EventDelegatingBehavior | None:
    """Nearest ancestor behavior delegating *event*, searching up to (not including) the page."""
    cursor = component.parent
    while cursor is not None and not isinstance(cursor, Page):
        for behavior in cursor.get_behaviors(EventDelegatingBehavior):
            if behavior.event.lower() == event.lower():
                return behavior
        cursor = cursor.parent
    return None


def resolve_and_render(
    component: Component,
    behavior: AjaxEventBehavior,
    response: HeaderResponse,
) -> Resolution:
    """Wire *behavior* for *component*: delegate to an ancestor or render a direct script.

    Exactly one of the two happens for an enabled component; nothing
    happens for a disabled one. The ancestor walk only runs when the
    page registered a delegating behavior for the event.
    """
    if not component.is_enabled_in_hierarchy():
        return Resolution.SKIPPED

    event = behavior.event
    if component.page.delegated_events.count(event) > 0:
        delegate = find_delegating_behavior(component, event)
        if delegate is not None:
            delegate.contribute_component_attributes(
                component.markup_id, behavior.render_ajax_attributes(component)
            )
            logger.debug(
                "%r delegates %r to %r", component, event, delegate.component
            )
            return Resolution.DELEGATED

    response.render(OnDomReadyHeaderItem.for_script(behavior.get_callback_script(component)))
    return Resolution.DIRECT
