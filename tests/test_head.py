"""Tests for perch.head — header items and de-duplication."""

import pytest

from perch.head import HeaderItem, HeaderResponse, JavaScriptHeaderItem, OnDomReadyHeaderItem


class TestHeaderResponse:
    def test_orders_javascript_before_dom_ready(self) -> None:
        response = HeaderResponse()
        response.render(OnDomReadyHeaderItem.for_script("ready()"))
        response.render(JavaScriptHeaderItem.for_script("lib()"))
        assert response.scripts() == ["lib()", "ready()"]

    def test_same_token_rendered_once(self) -> None:
        response = HeaderResponse()
        assert response.render(JavaScriptHeaderItem.for_script("a()", token="lib"))
        assert not response.render(JavaScriptHeaderItem.for_script("b()", token="lib"))
        assert response.javascript == ("a()",)

    def test_same_script_without_token_rendered_once(self) -> None:
        response = HeaderResponse()
        response.render(OnDomReadyHeaderItem.for_script("x()"))
        response.render(OnDomReadyHeaderItem.for_script("x()"))
        assert len(response) == 1

    def test_kinds_do_not_collide(self) -> None:
        response = HeaderResponse()
        response.render(JavaScriptHeaderItem.for_script("x()"))
        response.render(OnDomReadyHeaderItem.for_script("x()"))
        assert len(response) == 2

    def test_mark_rendered(self) -> None:
        response = HeaderResponse()
        response.mark_rendered(JavaScriptHeaderItem.for_script("lib()", token="lib"))
        assert response.was_rendered("lib")
        assert not response.render(JavaScriptHeaderItem.for_script("lib()", token="lib"))
        assert len(response) == 0

    def test_base_item_rejected(self) -> None:
        with pytest.raises(TypeError):
            HeaderResponse().render(HeaderItem(script="x()"))
