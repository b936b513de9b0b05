"""Form component updating behavior.

Sends the element's current value along with the event and stores it
into the component before ``on_update`` runs::

    select.add_behavior(
        AjaxFormComponentUpdatingBehavior("change", on_update=lambda target: ...)
    )
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from perch.ajax.attributes import AjaxRequestAttributes
from perch.ajax.behavior import call_handler
from perch.ajax.event import AjaxEventBehavior
from perch.components.component import Component
from perch.errors import InvalidArgument

if TYPE_CHECKING:
    from perch.ajax.target import AjaxRequestTarget
    from perch.components.basic import FormComponent

logger = logging.getLogger("perch.ajax")


class AjaxFormComponentUpdatingBehavior(AjaxEventBehavior):
    """Update a form component's value from the client on *event*."""

    def __init__(
        self,
        event: str,
        *,
        on_update: Callable[["AjaxRequestTarget | None"], Any] | None = None,
        stateless: bool = False,
    ) -> None:
        super().__init__(event, stateless=stateless)
        self._on_update = on_update

    def bind(self, component: Component) -> None:
        from perch.components.basic import FormComponent

        if not isinstance(component, FormComponent):
            msg = f"{type(self).__name__} needs a form component, got {component!r}"
            raise InvalidArgument(msg)
        super().bind(component)

    @property
    def form_component(self) -> "FormComponent":
        return self.component  # type: ignore[return-value]

    def update_ajax_attributes(self, attributes: AjaxRequestAttributes) -> None:
        super().update_ajax_attributes(attributes)
        attributes.form_param = self.form_component.input_name

    def on_event(self, target: "AjaxRequestTarget | None") -> None:
        component = self.form_component
        params = component.page.params
        raw = params.get(component.input_name)
        # The submitted value is request input, not page state.
        params.remove(component.input_name)
        component.process_input(raw)
        logger.debug("%r updated from input %r", component, raw)
        self.on_update(target)

    def on_update(self, target: "AjaxRequestTarget | None") -> None:
        """Called after the component's value was updated from the request."""
        call_handler(self._on_update, self, "on_update", target)
