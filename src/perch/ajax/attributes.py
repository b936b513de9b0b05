"""Ajax request attributes — the listener configuration a behavior ships to the client.

Serialized to compact JSON with short keys so the same payload can be
inlined in a direct ``Perch.Ajax.ajax(...)`` call or merged into a
delegating container's ``attrsById`` map:

====  =====================================
key   meaning
====  =====================================
u     callback url
c     markup id of the bound element
e     event names
m     method (``GET`` / ``POST``)
f     request parameter that carries the element value
pd    prevent default
sp    stop propagation
ch    channel
ep    extra request parameters
i     markup id of a busy indicator shown while the request runs
====  =====================================

Keys whose value is the default are omitted.
"""

import json
from dataclasses import dataclass, field
from typing import Any

_METHODS = frozenset({"GET", "POST"})


def script_json(value: Any, *, pretty: bool = False) -> str:
    """JSON for *value* that cannot close an enclosing ``<script>`` element."""
    if pretty:
        text = json.dumps(value, indent=2)
    else:
        text = json.dumps(value, separators=(",", ":"))
    return text.replace("</", "<\\/")


@dataclass(slots=True)
class AjaxRequestAttributes:
    """Mutable while behaviors update it; serialized once per render."""

    callback_url: str = ""
    markup_id: str = ""
    event_names: list[str] = field(default_factory=list)
    method: str = "GET"
    form_param: str = ""
    prevent_default: bool = False
    stop_propagation: bool = False
    channel: str = ""
    extra_parameters: dict[str, str] = field(default_factory=dict)
    indicator_id: str = ""

    def set_event_names(self, *names: str) -> "AjaxRequestAttributes":
        """Replace the event names. Returns self for chaining."""
        self.event_names = [n for n in names if n]
        return self

    def set_method(self, method: str) -> "AjaxRequestAttributes":
        method = method.upper()
        if method not in _METHODS:
            msg = f"Unsupported ajax method {method!r}; expected one of {sorted(_METHODS)}"
            raise ValueError(msg)
        self.method = method
        return self

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"u": self.callback_url, "c": self.markup_id}
        if self.event_names:
            data["e"] = list(self.event_names)
        if self.method != "GET":
            data["m"] = self.method
        if self.form_param:
            data["f"] = self.form_param
        if self.prevent_default:
            data["pd"] = True
        if self.stop_propagation:
            data["sp"] = True
        if self.channel:
            data["ch"] = self.channel
        if self.extra_parameters:
            data["ep"] = dict(self.extra_parameters)
        if self.indicator_id:
            data["i"] = self.indicator_id
        return data

    def to_json(self, *, pretty: bool = False) -> str:
        """JSON safe to inline in a ``<script>`` element."""
        return script_json(self.to_dict(), pretty=pretty)
