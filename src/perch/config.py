"""Render configuration.

RenderConfig is a frozen dataclass — immutable after creation, shared by
every page built from the same request cycle.
"""

import re
from dataclasses import dataclass

from perch.errors import ConfigurationError

_ID_START = re.compile(r"^[A-Za-z][A-Za-z0-9_\-]*$")


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Page rendering configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RenderConfig(debug=True, markup_id_prefix="c")
    """

    # Stateless listener dispatch
    listener_param: str = "_perch_listener"

    # Generated markup ids are ``{prefix}-{path parts}`` unless a component sets one
    markup_id_prefix: str = "id"

    # Client runtime — Perch.Ajax / Perch.Event helpers injected once per response
    runtime_script: bool = True

    # Pretty-print serialized ajax attributes
    debug: bool = False

    # Templates
    autoescape: bool = True
    title: str = "perch"

    def validate(self) -> None:
        """Raise ``ConfigurationError`` when a field cannot work at render time."""
        if not self.listener_param:
            raise ConfigurationError("listener_param must not be empty")
        if not _ID_START.match(self.markup_id_prefix):
            msg = (
                f"markup_id_prefix {self.markup_id_prefix!r} must start with a letter "
                "and contain only letters, digits, '-' or '_'"
            )
            raise ConfigurationError(msg)
