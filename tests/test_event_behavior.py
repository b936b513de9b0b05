"""Tests for perch.ajax.event — event normalization and delegation resolution."""

import pytest

from perch.ajax.event import (
    AjaxEventBehavior,
    EventDelegatingBehavior,
    Resolution,
    find_delegating_behavior,
    normalize_event,
    resolve_and_render,
)
from perch.components.basic import Label
from perch.components.component import Container
from perch.components.page import Page
from perch.errors import InvalidArgument
from perch.head import HeaderResponse


def _behavior(event: str = "click") -> AjaxEventBehavior:
    return AjaxEventBehavior(event, on_event=lambda target: None)


def _chain() -> tuple[Page, Container, Container, Label]:
    """page → a → b → c"""
    page = Page()
    a = Container("a")
    b = Container("b")
    c = Label("c", "leaf")
    b.add(c)
    a.add(b)
    page.add(a)
    return page, a, b, c


class TestNormalization:
    @pytest.mark.parametrize("raw", ["click", "CLICK", "onclick", "onClick", "ONCLICK"])
    def test_on_prefix_and_case(self, raw: str) -> None:
        assert AjaxEventBehavior(raw).event == "click"

    @pytest.mark.parametrize("event", ["change", "keydown", "blur", "submit"])
    def test_prefixed_equals_plain(self, event: str) -> None:
        assert AjaxEventBehavior("On" + event.upper()).event == AjaxEventBehavior(event).event

    @pytest.mark.parametrize("raw", ["", None])
    def test_empty_event_rejected(self, raw) -> None:
        with pytest.raises(InvalidArgument):
            AjaxEventBehavior(raw)  # type: ignore[arg-type]

    def test_bare_prefix_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            normalize_event("on")

    def test_invalid_argument_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            AjaxEventBehavior("")

    def test_on_check_event_sees_raw_event(self) -> None:
        seen = []

        class Checked(AjaxEventBehavior):
            def on_check_event(self, event: str) -> None:
                seen.append(event)
                if event.lower().endswith("load"):
                    raise InvalidArgument("load is not supported")

        assert Checked("onClick").event == "click"
        assert seen == ["onClick"]
        with pytest.raises(InvalidArgument):
            Checked("onload")

    def test_delegating_behavior_normalizes_too(self) -> None:
        assert EventDelegatingBehavior("OnChange").event == "change"


class TestDirectScript:
    def test_no_delegation_renders_one_direct_script(self) -> None:
        page, _, _, c = _chain()
        c.add_behavior(_behavior())
        response = HeaderResponse()
        page.render_head(response)

        assert len(response.dom_ready) == 1
        script = response.dom_ready[0]
        assert script.startswith("Perch.Ajax.ajax(")
        assert '"c":"id-a-b-c"' in script
        assert '"e":["click"]' in script

    def test_runtime_once_for_many_behaviors(self) -> None:
        page, a, b, c = _chain()
        for component in (a, b, c):
            component.add_behavior(_behavior())
        response = HeaderResponse()
        page.render_head(response)

        assert len(response.javascript) == 1
        assert len(response.dom_ready) == 3

    def test_delegation_for_other_event_is_ignored(self) -> None:
        page, _, b, c = _chain()
        b.add_behavior(EventDelegatingBehavior("change"))
        behavior = _behavior("click")
        c.add_behavior(behavior)

        assert resolve_and_render(c, behavior, HeaderResponse()) is Resolution.DIRECT

    def test_zero_count_forces_direct_script(self) -> None:
        page, _, b, c = _chain()
        delegating = EventDelegatingBehavior("click")
        b.add_behavior(delegating)
        behavior = _behavior()
        c.add_behavior(behavior)
        page.delegated_events.unregister("click")
        assert page.delegated_events.count("click") == 0

        response = HeaderResponse()
        assert resolve_and_render(c, behavior, response) is Resolution.DIRECT
        assert delegating.contributions == {}
        assert len(response.dom_ready) == 1


class TestDelegation:
    def test_nearest_ancestor_wins(self) -> None:
        page, a, b, c = _chain()
        outer = EventDelegatingBehavior("click")
        inner = EventDelegatingBehavior("click")
        a.add_behavior(outer)
        b.add_behavior(inner)
        behavior = _behavior()
        c.add_behavior(behavior)

        assert find_delegating_behavior(c, "click") is inner
        response = HeaderResponse()
        assert resolve_and_render(c, behavior, response) is Resolution.DELEGATED
        assert list(inner.contributions) == ["id-a-b-c"]
        assert outer.contributions == {}
        assert response.dom_ready == ()

    def test_event_match_is_case_insensitive(self) -> None:
        page, _, b, c = _chain()
        b.add_behavior(EventDelegatingBehavior("onCLICK"))
        behavior = _behavior("Click")
        c.add_behavior(behavior)
        assert resolve_and_render(c, behavior, HeaderResponse()) is Resolution.DELEGATED

    def test_contribution_is_serialized_attributes(self) -> None:
        page, _, b, c = _chain()
        delegating = EventDelegatingBehavior("click")
        b.add_behavior(delegating)
        behavior = _behavior()
        c.add_behavior(behavior)
        resolve_and_render(c, behavior, HeaderResponse())

        assert delegating.contributions["id-a-b-c"] == behavior.render_ajax_attributes(c)

    def test_walk_stops_below_page(self) -> None:
        page, _, _, c = _chain()
        page.add_behavior(EventDelegatingBehavior("click"))
        behavior = _behavior()
        c.add_behavior(behavior)

        assert page.delegated_events.count("click") == 1
        assert find_delegating_behavior(c, "click") is None
        assert resolve_and_render(c, behavior, HeaderResponse()) is Resolution.DIRECT

    def test_single_consolidated_script_for_siblings(self) -> None:
        page = Page()
        items = Container("items")
        items.add_behavior(EventDelegatingBehavior("click"))
        first, second = Label("first", "1"), Label("second", "2")
        first.add_behavior(_behavior())
        second.add_behavior(_behavior())
        items.add(first, second)
        page.add(items)

        response = HeaderResponse()
        page.render_head(response)

        assert len(response.dom_ready) == 1
        script = response.dom_ready[0]
        assert script.startswith('Perch.Ajax.delegate("id-items","click",{')
        assert '"id-items-first":{' in script
        assert '"id-items-second":{' in script

    def test_contributions_cleared_after_pass(self) -> None:
        page, _, b, c = _chain()
        delegating = EventDelegatingBehavior("click")
        b.add_behavior(delegating)
        c.add_behavior(_behavior())
        page.render_head(HeaderResponse())
        assert delegating.contributions == {}

    def test_no_contributions_no_script(self) -> None:
        page, _, b, _ = _chain()
        b.add_behavior(EventDelegatingBehavior("click"))
        response = HeaderResponse()
        page.render_head(response)
        assert len(response) == 0

    def test_container_markup_id_cannot_close_script(self) -> None:
        page = Page()
        items = Container("items")
        items.markup_id = "x</script><script>alert(1)//"
        items.add_behavior(EventDelegatingBehavior("click"))
        item = Label("item", "1")
        item.markup_id = "y</script>"
        item.add_behavior(_behavior())
        items.add(item)
        page.add(items)

        response = HeaderResponse()
        page.render_head(response)
        script = response.dom_ready[0]
        assert "</script>" not in script
        assert script.startswith('Perch.Ajax.delegate("x<\\/script><script>alert(1)//","click",{')
        assert '"y<\\/script>":{' in script

    def test_delegating_behavior_needs_container(self) -> None:
        with pytest.raises(InvalidArgument):
            Label("x").add_behavior(EventDelegatingBehavior("click"))

    def test_delegating_container_outputs_markup_id(self) -> None:
        items = Container("items")
        items.add_behavior(EventDelegatingBehavior("click"))
        assert items.output_markup_id is True


class TestDisabled:
    def test_disabled_component_renders_nothing(self) -> None:
        page, _, _, c = _chain()
        behavior = _behavior()
        c.add_behavior(behavior)
        c.set_enabled(False)

        response = HeaderResponse()
        assert resolve_and_render(c, behavior, response) is Resolution.SKIPPED
        assert response.dom_ready == ()

    def test_disabled_ancestor_suppresses_delegation(self) -> None:
        page, a, b, c = _chain()
        delegating = EventDelegatingBehavior("click")
        a.add_behavior(delegating)
        behavior = _behavior()
        c.add_behavior(behavior)
        b.set_enabled(False)

        response = HeaderResponse()
        page.render_head(response)
        assert response.dom_ready == ()
        assert resolve_and_render(c, behavior, response) is Resolution.SKIPPED
        assert delegating.contributions == {}

    def test_disabled_component_skips_delegation(self) -> None:
        page, _, b, c = _chain()
        delegating = EventDelegatingBehavior("click")
        b.add_behavior(delegating)
        behavior = _behavior()
        c.add_behavior(behavior)
        c.set_enabled(False)

        response = HeaderResponse()
        assert resolve_and_render(c, behavior, response) is Resolution.SKIPPED
        assert delegating.contributions == {}
        assert response.dom_ready == ()

        page.render_head(response)
        assert response.dom_ready == ()


class TestEventHandling:
    def test_respond_calls_on_event(self) -> None:
        calls = []
        behavior = AjaxEventBehavior("click", on_event=calls.append)
        behavior.on_request(None)
        assert calls == [None]

    def test_missing_handler(self) -> None:
        with pytest.raises(NotImplementedError):
            AjaxEventBehavior("click").on_request(None)

    def test_subclass_override(self) -> None:
        class Clicked(AjaxEventBehavior):
            fired = False

            def on_event(self, target) -> None:
                type(self).fired = True

        Clicked("click").on_request(None)
        assert Clicked.fired is True
