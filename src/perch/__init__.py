"""Perch — server-side components with ajax event behaviors.

Pages are trees of components; behaviors attached to components bind
server callbacks to client-side events. Descendants that share an event
inside a container can be served by one delegated listener instead of a
listener each.

Basic usage::

    from perch import AjaxLink, Label, Page, RequestCycle

    class Counter(Page):
        def __init__(self, params=None):
            super().__init__(params)
            self.set_stateless_hint(True)
            count = Label("count", lambda: self.params.get_int("n", 0))
            count.set_output_markup_id(True)

            def increment(target):
                self.params.set("n", count.text + 1)
                if target is not None:
                    target.add(count, link)

            link = AjaxLink("inc", "+1", on_click=increment, stateless=True)
            self.add(count, link)

    cycle = RequestCycle(Counter)
    html = cycle.handle("").text
"""

__version__ = "0.1.0-dev"
__all__ = [
    "AjaxEventBehavior",
    "AjaxFormComponentUpdatingBehavior",
    "AjaxLink",
    "AjaxRequestAttributes",
    "AjaxRequestTarget",
    "Behavior",
    "Component",
    "ComponentTreeError",
    "ConfigurationError",
    "Container",
    "DropDownChoice",
    "EventDelegatingBehavior",
    "HeaderResponse",
    "IndicatingAjaxLink",
    "InvalidArgument",
    "Label",
    "ListenerNotFound",
    "ListenerRejected",
    "OnDomReadyHeaderItem",
    "Page",
    "PageParameters",
    "PerchError",
    "RenderConfig",
    "RequestCycle",
    "Response",
]

_LAZY_IMPORTS: dict[str, str] = {
    "AjaxEventBehavior": "perch.ajax.event",
    "AjaxFormComponentUpdatingBehavior": "perch.ajax.updating",
    "AjaxLink": "perch.components.basic",
    "AjaxRequestAttributes": "perch.ajax.attributes",
    "AjaxRequestTarget": "perch.ajax.target",
    "Behavior": "perch.ajax.behavior",
    "Component": "perch.components.component",
    "ComponentTreeError": "perch.errors",
    "ConfigurationError": "perch.errors",
    "Container": "perch.components.component",
    "DropDownChoice": "perch.components.basic",
    "EventDelegatingBehavior": "perch.ajax.event",
    "HeaderResponse": "perch.head",
    "IndicatingAjaxLink": "perch.components.basic",
    "InvalidArgument": "perch.errors",
    "Label": "perch.components.basic",
    "ListenerNotFound": "perch.errors",
    "ListenerRejected": "perch.errors",
    "OnDomReadyHeaderItem": "perch.head",
    "Page": "perch.components.page",
    "PageParameters": "perch.params",
    "PerchError": "perch.errors",
    "RenderConfig": "perch.config",
    "RequestCycle": "perch.request",
    "Response": "perch.request",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    import importlib

    return getattr(importlib.import_module(module_name), name)
