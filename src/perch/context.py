"""Request-scoped render configuration via ContextVar.

``RequestCycle`` sets ``config_var`` while it builds and renders a page,
so page constructors keep a plain ``__init__(self, params)`` signature
and still pick up the cycle's configuration.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    threads. No locks needed.
"""

from contextvars import ContextVar

from perch.config import RenderConfig

DEFAULT_CONFIG = RenderConfig()

config_var: ContextVar[RenderConfig] = ContextVar("perch_config")
"""The active render configuration. Set by ``RequestCycle`` for one request."""


def get_config() -> RenderConfig:
    """Return the active configuration, or ``DEFAULT_CONFIG`` outside a request."""
    return config_var.get(DEFAULT_CONFIG)
