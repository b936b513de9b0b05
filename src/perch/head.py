"""Header contributions.

Behaviors do not write ``<script>`` tags themselves. They hand header
items to a ``HeaderResponse`` during the head pass; the page (or the
ajax target) renders the collected items once, in order, after the
markup they refer to.

Two kinds of item:

- ``JavaScriptHeaderItem`` — inline script, runs where the head renders.
- ``OnDomReadyHeaderItem`` — deferred until the DOM is ready, so the
  element it binds to is guaranteed to exist client-side.

Each item carries a token. A response renders a token at most once,
which is how the client runtime ends up in the page exactly once no
matter how many behaviors ask for it.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HeaderItem:
    """Base header item. ``token`` identifies duplicates."""

    script: str
    token: str = ""

    @property
    def key(self) -> tuple[str, str]:
        return (type(self).__name__, self.token or self.script)


@dataclass(frozen=True, slots=True)
class JavaScriptHeaderItem(HeaderItem):
    """Inline script rendered in head order."""

    @classmethod
    def for_script(cls, script: str, token: str = "") -> "JavaScriptHeaderItem":
        return cls(script=script, token=token)


@dataclass(frozen=True, slots=True)
class OnDomReadyHeaderItem(HeaderItem):
    """Script deferred until the DOM is ready."""

    @classmethod
    def for_script(cls, script: str, token: str = "") -> "OnDomReadyHeaderItem":
        return cls(script=script, token=token)


class HeaderResponse:
    """Collects header items for one response, dropping duplicates."""

    __slots__ = ("_dom_ready", "_javascript", "_seen")

    def __init__(self) -> None:
        self._seen: set[tuple[str, str]] = set()
        self._javascript: list[JavaScriptHeaderItem] = []
        self._dom_ready: list[OnDomReadyHeaderItem] = []

    def render(self, item: HeaderItem) -> bool:
        """Queue *item*. Returns False when an equal item was already queued."""
        if item.key in self._seen:
            return False
        self._seen.add(item.key)
        if isinstance(item, OnDomReadyHeaderItem):
            self._dom_ready.append(item)
        elif isinstance(item, JavaScriptHeaderItem):
            self._javascript.append(item)
        else:
            msg = f"Unsupported header item: {type(item).__name__}"
            raise TypeError(msg)
        return True

    def mark_rendered(self, item: HeaderItem) -> None:
        """Treat *item* as already present client-side; later ``render`` calls skip it."""
        self._seen.add(item.key)

    def was_rendered(self, token: str, kind: type[HeaderItem] = JavaScriptHeaderItem) -> bool:
        return (kind.__name__, token) in self._seen

    @property
    def javascript(self) -> tuple[str, ...]:
        return tuple(item.script for item in self._javascript)

    @property
    def dom_ready(self) -> tuple[str, ...]:
        return tuple(item.script for item in self._dom_ready)

    def scripts(self) -> list[str]:
        """Head-ordered inline scripts followed by DOM-ready scripts."""
        return [*self.javascript, *self.dom_ready]

    def __len__(self) -> int:
        return len(self._javascript) + len(self._dom_ready)
