"""Tests for perch.errors — the shared exception hierarchy."""

import pytest

from perch.errors import (
    ComponentTreeError,
    ConfigurationError,
    InvalidArgument,
    ListenerError,
    ListenerNotFound,
    ListenerRejected,
    PerchError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ComponentTreeError, ConfigurationError, InvalidArgument, ListenerNotFound, ListenerRejected],
    )
    def test_all_are_perch_errors(self, cls: type[Exception]) -> None:
        assert issubclass(cls, PerchError)

    def test_invalid_argument_is_value_error(self) -> None:
        assert issubclass(InvalidArgument, ValueError)

    def test_listener_errors_share_base(self) -> None:
        assert issubclass(ListenerNotFound, ListenerError)
        assert issubclass(ListenerRejected, ListenerError)


class TestListenerError:
    def test_message_with_detail(self) -> None:
        exc = ListenerNotFound("box:0", "no component at 'box'")
        assert exc.listener == "box:0"
        assert exc.detail == "no component at 'box'"
        assert str(exc) == "box:0: no component at 'box'"

    def test_message_without_detail(self) -> None:
        assert str(ListenerRejected("box:0")) == "box:0"
