"""Perch exception hierarchy.

Shared across components, behaviors, rendering, and the request cycle
so every module raises and catches the same types.
"""


class PerchError(Exception):
    """Base for all perch-specific errors."""


class InvalidArgument(PerchError, ValueError):  # noqa: N818
    """Raised when a constructor or mutator receives an unusable argument.

    Empty event names, duplicate child ids, and behaviors bound to a
    second component all land here.
    """


class ConfigurationError(PerchError):
    """Raised when render configuration is invalid.

    Typically caught by ``RenderConfig.validate()`` when a page is built.
    """


class ComponentTreeError(PerchError):
    """Raised when a component needs its page but is not attached to one."""


class ListenerError(PerchError):
    """Base for stateless listener dispatch failures."""

    def __init__(self, listener: str, detail: str = "") -> None:
        self.listener = listener
        self.detail = detail
        super().__init__(f"{listener}: {detail}" if detail else listener)


class ListenerNotFound(ListenerError):  # noqa: N818
    """No component or behavior matches the listener parameter."""


class ListenerRejected(ListenerError):  # noqa: N818
    """The listener exists but its component refuses the request (disabled)."""
