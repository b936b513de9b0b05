"""Page parameters for stateless rendering.

Everything a stateless page needs to rebuild itself travels in the
query string. ``PageParameters`` is the mutable, ordered, multi-valued
view of it: pages read their state from it and listeners write the next
state back before re-rendering links.

Implements ``MutableMapping[str, str]``; ``__getitem__`` returns the
first value for a key and ``get_list`` returns all of them.
"""

from collections.abc import Iterable, Iterator, MutableMapping
from urllib.parse import parse_qsl, quote, urlencode


class PageParameters(MutableMapping[str, str]):
    """Ordered multi-valued string parameters.

    Attributes:
        _data: Field name -> list of values, in first-seen order.
    """

    _data: dict[str, list[str]]

    __slots__ = ("_data",)

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        self._data = {}
        for key, value in items:
            self.add(key, value)

    @classmethod
    def from_query_string(cls, query_string: str | bytes = "") -> "PageParameters":
        """Parse a raw query string, keeping blank values."""
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        return cls(parse_qsl(query_string.lstrip("?"), keep_blank_values=True))

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = [str(value)]

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PageParameters):
            return self._data == other._data
        return NotImplemented

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"PageParameters({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first non-empty value for *key*, or *default*."""
        values = self._data.get(key)
        if values and values[0] != "":
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def set(self, key: str, value: object) -> "PageParameters":
        """Replace every value of *key* with ``str(value)``. Returns self for chaining."""
        self[key] = str(value)
        return self

    def add(self, key: str, value: object) -> "PageParameters":
        """Append a value to *key*. Returns self for chaining."""
        self._data.setdefault(key, []).append(str(value))
        return self

    def remove(self, key: str) -> "PageParameters":
        """Drop *key* if present. Returns self for chaining."""
        self._data.pop(key, None)
        return self

    def copy(self) -> "PageParameters":
        return PageParameters(self.items_all())

    def items_all(self) -> list[tuple[str, str]]:
        """Every ``(key, value)`` pair, multi-values expanded, in order."""
        return [(key, value) for key, values in self._data.items() for value in values]

    def to_query_string(self) -> str:
        """Encode back to ``a=1&b=2`` (no leading ``?``)."""
        return urlencode(self.items_all(), quote_via=quote)
