"""Basic widgets: labels, ajax links, and drop-down choices."""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from perch.ajax.attributes import AjaxRequestAttributes
from perch.ajax.behavior import call_handler
from perch.ajax.event import AjaxEventBehavior
from perch.components.component import Component

if TYPE_CHECKING:
    from perch.ajax.target import AjaxRequestTarget


class Label(Component):
    """Renders text in a ``<span>``.

    *text* may be a callable, evaluated at every render. Assigning
    ``label.text`` replaces it with a fixed value.
    """

    template: ClassVar[str] = "<span{{ attrs | attrs }}>{{ text }}</span>"

    def __init__(self, id: str, text: object | Callable[[], object] = "") -> None:  # noqa: A002
        super().__init__(id)
        self._text = text

    @property
    def text(self) -> object:
        return self._text() if callable(self._text) else self._text

    @text.setter
    def text(self, value: object) -> None:
        self._text = value

    def render_context(self) -> dict[str, Any]:
        context = super().render_context()
        text = self.text
        context["text"] = "" if text is None else text
        return context


class _LinkClickBehavior(AjaxEventBehavior):
    def __init__(self, link: "AjaxLink", *, stateless: bool) -> None:
        super().__init__("click", stateless=stateless)
        self._link = link

    def update_ajax_attributes(self, attributes: AjaxRequestAttributes) -> None:
        super().update_ajax_attributes(attributes)
        attributes.prevent_default = True
        indicator_id = self._link.get_ajax_indicator_markup_id()
        if indicator_id:
            attributes.indicator_id = indicator_id

    def on_event(self, target: "AjaxRequestTarget | None") -> None:
        self._link.on_click(target)


class AjaxLink(Component):
    """A link that calls ``on_click`` over ajax.

    The ``href`` points at the same listener, so without JavaScript the
    click still reaches ``on_click`` as a full-page request with
    ``target=None``.
    """

    template: ClassVar[str] = "<a{{ attrs | attrs }}>{{ body }}</a>"

    def __init__(
        self,
        id: str,  # noqa: A002
        body: object = "",
        *,
        on_click: Callable[["AjaxRequestTarget | None"], Any] | None = None,
        stateless: bool = False,
    ) -> None:
        super().__init__(id)
        self.body = body
        self._on_click = on_click
        self.click_behavior = _LinkClickBehavior(self, stateless=stateless)
        self.add_behavior(self.click_behavior)

    def on_click(self, target: "AjaxRequestTarget | None") -> None:
        call_handler(self._on_click, self, "on_click", target)

    def get_ajax_indicator_markup_id(self) -> str | None:
        """Markup id of an element to show while a click is in flight."""
        return None

    def on_component_tag(self, attributes: dict[str, Any]) -> None:
        if self.is_enabled_in_hierarchy():
            attributes["href"] = self.click_behavior.get_callback_url(self)
        else:
            attributes["aria-disabled"] = "true"

    def render_context(self) -> dict[str, Any]:
        context = super().render_context()
        context["body"] = self.body
        return context


class IndicatingAjaxLink(AjaxLink):
    """An ``AjaxLink`` with a busy indicator, shown while the click is in flight.

    The indicator is rendered hidden inside the link, so re-rendering the
    link through an ajax target replaces both.
    """

    template: ClassVar[str] = (
        "<a{{ attrs | attrs }}>{{ body }}"
        '<span id="{{ indicator_id }}" class="perch-ajax-indicator" hidden>{{ indicator }}</span>'
        "</a>"
    )
    indicator: ClassVar[str] = "Loading..."

    def get_ajax_indicator_markup_id(self) -> str:
        return f"{self.markup_id}--indicator"

    def render_context(self) -> dict[str, Any]:
        context = super().render_context()
        context["indicator_id"] = self.get_ajax_indicator_markup_id()
        context["indicator"] = self.indicator
        return context


class FormComponent(Component):
    """A component whose value comes back from the client under ``input_name``."""

    def __init__(self, id: str, value: Any = None) -> None:  # noqa: A002
        super().__init__(id)
        self.value = value

    @property
    def input_name(self) -> str:
        return self.path

    def convert_input(self, raw: str | None) -> Any:
        return raw

    def process_input(self, raw: str | None) -> None:
        self.value = self.convert_input(raw)

    def on_component_tag(self, attributes: dict[str, Any]) -> None:
        attributes["name"] = self.input_name
        if not self.is_enabled_in_hierarchy():
            attributes["disabled"] = True


class DropDownChoice(FormComponent):
    """A ``<select>`` over a fixed list of string choices.

    Input that is not one of the choices converts to ``None``.
    """

    template: ClassVar[str] = (
        "<select{{ attrs | attrs }}>"
        "{% for choice in choices %}"
        '<option value="{{ choice }}"{% if choice == selected %} selected{% endif %}>{{ choice }}</option>'
        "{% endfor %}"
        "</select>"
    )

    def __init__(
        self,
        id: str,  # noqa: A002
        choices: Sequence[str],
        value: str | None = None,
    ) -> None:
        super().__init__(id, value)
        self.choices = [str(choice) for choice in choices]

    def convert_input(self, raw: str | None) -> str | None:
        return raw if raw in self.choices else None

    def render_context(self) -> dict[str, Any]:
        context = super().render_context()
        context["choices"] = self.choices
        context["selected"] = self.value
        return context
