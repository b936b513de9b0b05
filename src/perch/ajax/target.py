"""Ajax request target — what a listener wants updated in the browser.

Listeners add components to re-render and scripts to run::

    def on_click(target):
        target.add(counter_label, self)
        target.append_javascript("console.log('clicked')")

``render()`` turns that into an ``AjaxResponse``: fresh markup per
markup id plus the header scripts the re-rendered components need.
"""

import json
from dataclasses import dataclass, field

from perch.ajax.event import EventDelegatingBehavior
from perch.ajax.runtime import RUNTIME_JS, RUNTIME_TOKEN
from perch.components.component import Component, Container
from perch.components.page import Page
from perch.errors import InvalidArgument
from perch.head import HeaderResponse, JavaScriptHeaderItem


@dataclass(frozen=True, slots=True)
class AjaxResponse:
    """Rendered result of one ajax request."""

    components: dict[str, str] = field(default_factory=dict)
    prepend: tuple[str, ...] = ()
    scripts: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "components": dict(self.components),
            "prepend": list(self.prepend),
            "scripts": list(self.scripts),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


class AjaxRequestTarget:
    """Collects components and scripts for one ajax response."""

    def __init__(self, page: Page) -> None:
        self.page = page
        self._components: dict[str, Component] = {}
        self._prepend: list[str] = []
        self._append: list[str] = []

    def add(self, *components: Component) -> "AjaxRequestTarget":
        """Re-render *components*. They must output their markup id."""
        for component in components:
            if not component.output_markup_id:
                msg = (
                    f"{component!r} cannot be updated without a markup id; "
                    "call set_output_markup_id(True) on it"
                )
                raise InvalidArgument(msg)
            if component.find_page() is not self.page:
                msg = f"{component!r} does not belong to {self.page!r}"
                raise InvalidArgument(msg)
            self._components[component.markup_id] = component
        return self

    @property
    def components(self) -> tuple[Component, ...]:
        return tuple(self._components.values())

    def append_javascript(self, script: str) -> "AjaxRequestTarget":
        """Run *script* after the components are swapped."""
        self._append.append(script)
        return self

    def prepend_javascript(self, script: str) -> "AjaxRequestTarget":
        """Run *script* before the components are swapped."""
        self._prepend.append(script)
        return self

    def _roots(self) -> list[Component]:
        # A component whose ancestor is also being updated arrives with it.
        added = set(map(id, self._components.values()))
        return [
            component
            for component in self._components.values()
            if not any(id(ancestor) in added for ancestor in component.ancestors())
        ]

    def render(self) -> AjaxResponse:
        roots = self._roots()
        markup = {component.markup_id: str(component.render()) for component in roots}

        response = HeaderResponse()
        # The runtime is already in the page that issued the request.
        response.mark_rendered(JavaScriptHeaderItem.for_script(RUNTIME_JS, token=RUNTIME_TOKEN))
        for component in roots:
            component.render_head(response)
        self._flush_delegates(roots, response)

        scripts = [*response.scripts(), *self._append]
        return AjaxResponse(components=markup, prepend=tuple(self._prepend), scripts=tuple(scripts))

    def _flush_delegates(self, roots: list[Component], response: HeaderResponse) -> None:
        """Render delegation scripts for ancestors that are not re-rendered themselves.

        A re-rendered component inside a delegating container hands its
        attributes to the container, whose own head pass is not part of
        this response.
        """
        seen: set[int] = set()
        for component in roots:
            for ancestor in component.ancestors():
                if id(ancestor) in seen or not isinstance(ancestor, Container):
                    continue
                seen.add(id(ancestor))
                for behavior in ancestor.get_behaviors(EventDelegatingBehavior):
                    if behavior.contributions:
                        behavior.after_children_head(ancestor, response)
