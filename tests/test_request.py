"""Tests for perch.request — stateless request cycle."""

import json

import pytest

from perch.ajax.behavior import Behavior
from perch.components.basic import AjaxLink, Label
from perch.components.page import Page
from perch.config import RenderConfig
from perch.context import get_config
from perch.errors import ListenerNotFound, ListenerRejected
from perch.request import RequestCycle


class CounterPage(Page):
    def __init__(self, params=None):
        super().__init__(params)
        self.set_stateless_hint(True)
        self.count = Label("count", lambda: self.params.get_int("n", 0)).set_output_markup_id(True)

        def increment(target):
            self.params.set("n", self.count.text + 1)
            if target is not None:
                target.add(self.count)

        self.link = AjaxLink("inc", "+1", on_click=increment, stateless=True)
        self.add(self.count, self.link)
        self.link.add_behavior(Behavior())


class StatefulPage(Page):
    def __init__(self, params=None):
        super().__init__(params)
        self.add(AjaxLink("inc", on_click=lambda target: None))


class TestRequestCycle:
    def test_page_render(self) -> None:
        response = RequestCycle(CounterPage).handle("n=4")
        assert response.status == 200
        assert '<span id="id-count">4</span>' in response.text
        assert "n=4&amp;_perch_listener=inc%3A0" in response.text

    def test_listener_param_not_kept_in_page_parameters(self) -> None:
        response = RequestCycle(CounterPage).handle("n=1&_perch_listener=inc:0")
        body = json.loads(response.text)
        assert body["components"] == {"id-count": '<span id="id-count">2</span>'}

    def test_fallback(self) -> None:
        response = RequestCycle(CounterPage).handle("_perch_listener=inc:0", ajax=False)
        assert '<span id="id-count">1</span>' in response.text

    def test_custom_config_applies_and_resets(self) -> None:
        config = RenderConfig(listener_param="l", markup_id_prefix="c")
        response = RequestCycle(CounterPage, config).handle("l=inc:0")
        assert json.loads(response.text)["components"] == {"c-count": '<span id="c-count">1</span>'}
        assert get_config().listener_param == "_perch_listener"

    @pytest.mark.parametrize(
        "listener",
        ["inc", "inc:x", "missing:0", "inc:5", "inc:1", "count:0", ":0"],
    )
    def test_unknown_listener(self, listener: str) -> None:
        with pytest.raises(ListenerNotFound) as exc_info:
            RequestCycle(CounterPage).handle(f"_perch_listener={listener}")
        assert exc_info.value.listener == listener

    def test_stateful_page_rejected(self) -> None:
        with pytest.raises(ListenerRejected, match="not stateless"):
            RequestCycle(StatefulPage).handle("_perch_listener=inc:0")

    def test_disabled_component_rejected(self) -> None:
        class Disabled(CounterPage):
            def __init__(self, params=None):
                super().__init__(params)
                self.link.set_enabled(False)

        with pytest.raises(ListenerRejected, match="disabled"):
            RequestCycle(Disabled).handle("_perch_listener=inc:0")
