"""Component tree.

A page is a tree of components. Containers own their children; every
child keeps a non-owning back-reference to its parent. Behaviors attach
to components and take part in two passes:

- the markup pass (``render``), where they may add tag attributes, and
- the head pass (``render_head``), where they contribute header items.
  Behaviors see ``render_head`` on the way down and
  ``after_children_head`` on the way back up, so a container's behavior
  can act on what its descendants contributed.

Components find their page by walking parents. When a subtree joins or
leaves a page, every behavior in it is told (``on_page_attached`` /
``on_page_detached``), which is where page-scoped registrations live.
"""

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from kida.template import Markup

from perch.errors import ComponentTreeError, InvalidArgument

if TYPE_CHECKING:
    from perch.ajax.behavior import Behavior
    from perch.components.page import Page
    from perch.head import HeaderResponse

_COMPONENT_ID = re.compile(r"^[A-Za-z0-9_]+$")

B = TypeVar("B", bound="Behavior")


class Component:
    """A node in the component tree.

    Component ids are unique among siblings and limited to letters,
    digits and ``_`` so that generated markup ids and listener paths
    stay unambiguous.
    """

    template: ClassVar[str] = "<span{{ attrs | attrs }}></span>"

    def __init__(self, id: str) -> None:  # noqa: A002
        if not id or not _COMPONENT_ID.match(id):
            msg = f"Component id {id!r} must be non-empty and contain only letters, digits or '_'"
            raise InvalidArgument(msg)
        self._id = id
        self._parent: Container | None = None
        self._behaviors: list[Behavior] = []
        self._markup_id: str | None = None
        self.output_markup_id = False
        self.enabled = True
        self.visible = True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.path or self._id!r}>"

    # -- Tree --

    @property
    def id(self) -> str:
        return self._id

    @property
    def parent(self) -> "Container | None":
        return self._parent

    def find_page(self) -> "Page | None":
        """Return the page this component belongs to, or None when detached."""
        from perch.components.page import Page

        cursor: Component | None = self
        while cursor is not None:
            if isinstance(cursor, Page):
                return cursor
            cursor = cursor._parent
        return None

    @property
    def page(self) -> "Page":
        page = self.find_page()
        if page is None:
            msg = f"{self!r} is not attached to a page"
            raise ComponentTreeError(msg)
        return page

    @property
    def path(self) -> str:
        """Colon-separated ids from below the page down to this component."""
        from perch.components.page import Page

        parts: list[str] = []
        cursor: Component | None = self
        while cursor is not None and not isinstance(cursor, Page):
            parts.append(cursor._id)
            cursor = cursor._parent
        return ":".join(reversed(parts))

    def ancestors(self) -> Iterator["Container"]:
        """Yield parents from the nearest upward, including the page."""
        cursor = self._parent
        while cursor is not None:
            yield cursor
            cursor = cursor._parent

    # -- Markup id --

    @property
    def markup_id(self) -> str:
        """Explicit markup id, else one derived from the component path.

        Derived ids depend only on tree position, so a stateless page
        rebuilt for a listener request produces the same ids as the page
        that rendered the link.
        """
        if self._markup_id is not None:
            return self._markup_id
        from perch.context import get_config

        page = self.find_page()
        prefix = page.config.markup_id_prefix if page is not None else get_config().markup_id_prefix
        return "-".join([prefix, *self.path.split(":")])

    @markup_id.setter
    def markup_id(self, value: str) -> None:
        if not value:
            raise InvalidArgument("markup id must not be empty")
        self._markup_id = value
        self.output_markup_id = True

    def set_output_markup_id(self, flag: bool = True) -> "Component":
        """Render the ``id`` attribute. Returns self for chaining."""
        self.output_markup_id = flag
        return self

    # -- State --

    def set_enabled(self, flag: bool) -> "Component":
        self.enabled = flag
        return self

    def set_visible(self, flag: bool) -> "Component":
        self.visible = flag
        return self

    def is_enabled_in_hierarchy(self) -> bool:
        cursor: Component | None = self
        while cursor is not None:
            if not cursor.enabled:
                return False
            cursor = cursor._parent
        return True

    def is_visible_in_hierarchy(self) -> bool:
        cursor: Component | None = self
        while cursor is not None:
            if not cursor.visible:
                return False
            cursor = cursor._parent
        return True

    def is_stateless(self) -> bool:
        """True when every attached behavior can be rebuilt from the request."""
        return all(behavior.stateless_hint(self) for behavior in self._behaviors)

    # -- Behaviors --

    @property
    def behaviors(self) -> tuple["Behavior", ...]:
        return tuple(self._behaviors)

    def add_behavior(self, *behaviors: "Behavior") -> "Component":
        """Attach behaviors. Returns self for chaining."""
        page = self.find_page()
        for behavior in behaviors:
            behavior.bind(self)
            self._behaviors.append(behavior)
            if page is not None:
                behavior.on_page_attached(self, page)
        return self

    def remove_behavior(self, behavior: "Behavior") -> "Component":
        if behavior not in self._behaviors:
            msg = f"{behavior!r} is not attached to {self!r}"
            raise InvalidArgument(msg)
        page = self.find_page()
        if page is not None:
            behavior.on_page_detached(self, page)
        self._behaviors.remove(behavior)
        behavior.unbind(self)
        return self

    def get_behaviors(self, kind: type[B] | None = None) -> list[B]:
        """Attached behaviors, optionally only those that are instances of *kind*."""
        if kind is None:
            return list(self._behaviors)  # type: ignore[arg-type]
        return [b for b in self._behaviors if isinstance(b, kind)]

    def behavior_index(self, behavior: "Behavior") -> int:
        return self._behaviors.index(behavior)

    def _attached(self, page: "Page") -> None:
        for behavior in self._behaviors:
            behavior.on_page_attached(self, page)

    def _detached(self, page: "Page") -> None:
        for behavior in self._behaviors:
            behavior.on_page_detached(self, page)

    # -- Rendering --

    def tag_attributes(self) -> dict[str, Any]:
        attributes: dict[str, Any] = {}
        if self.output_markup_id:
            attributes["id"] = self.markup_id
        self.on_component_tag(attributes)
        for behavior in self._behaviors:
            behavior.on_component_tag(self, attributes)
        return attributes

    def on_component_tag(self, attributes: dict[str, Any]) -> None:
        """Hook for subclasses to adjust tag attributes before behaviors do."""

    def render_context(self) -> dict[str, Any]:
        return {"attrs": self.tag_attributes()}

    def render(self) -> Markup:
        """Render this component's markup. Hidden components render nothing."""
        if not self.is_visible_in_hierarchy():
            return Markup("")
        return self.page.renderer.render(self.template, self.render_context())

    def render_head(self, response: "HeaderResponse") -> None:
        """Head pass for this component and, for containers, its subtree."""
        if not self.is_visible_in_hierarchy():
            return
        for behavior in self._behaviors:
            behavior.render_head(self, response)
        self._render_children_head(response)
        for behavior in self._behaviors:
            behavior.after_children_head(self, response)

    def _render_children_head(self, response: "HeaderResponse") -> None:
        pass


class Container(Component):
    """A component that owns ordered, id-keyed children."""

    tag: ClassVar[str] = "div"
    template: ClassVar[str] = "<{{ tag }}{{ attrs | attrs }}>{{ body }}</{{ tag }}>"

    def __init__(self, id: str) -> None:  # noqa: A002
        super().__init__(id)
        self._children: dict[str, Component] = {}

    def add(self, *children: Component) -> "Container":
        """Add children in order. Returns self for chaining."""
        page = self.find_page()
        for child in children:
            if child._parent is not None:
                msg = f"{child!r} already belongs to {child._parent!r}"
                raise InvalidArgument(msg)
            if child.id in self._children:
                msg = f"{self!r} already has a child with id {child.id!r}"
                raise InvalidArgument(msg)
            self._children[child.id] = child
            child._parent = self
            if page is not None:
                child._attached(page)
        return self

    def remove(self, child: "Component | str") -> Component:
        """Detach a child (or the child with that id) and return it."""
        key = child if isinstance(child, str) else child.id
        try:
            removed = self._children[key]
        except KeyError:
            msg = f"{self!r} has no child {key!r}"
            raise InvalidArgument(msg) from None
        if not isinstance(child, str) and removed is not child:
            msg = f"{child!r} is not a child of {self!r}"
            raise InvalidArgument(msg)
        page = self.find_page()
        if page is not None:
            removed._detached(page)
        del self._children[key]
        removed._parent = None
        return removed

    def get(self, id: str) -> Component | None:  # noqa: A002
        return self._children.get(id)

    def __iter__(self) -> Iterator[Component]:
        return iter(list(self._children.values()))

    def __len__(self) -> int:
        return len(self._children)

    def __contains__(self, child: object) -> bool:
        return isinstance(child, Component) and self._children.get(child.id) is child

    def visit(self) -> Iterator[Component]:
        """Yield this container and every descendant, pre-order."""
        stack: list[Component] = [self]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, Container):
                stack.extend(reversed(list(node._children.values())))

    def _attached(self, page: "Page") -> None:
        super()._attached(page)
        for child in self._children.values():
            child._attached(page)

    def _detached(self, page: "Page") -> None:
        for child in self._children.values():
            child._detached(page)
        super()._detached(page)

    def render_body(self) -> Markup:
        return Markup("".join(child.render() for child in self._children.values()))

    def render_context(self) -> dict[str, Any]:
        context = super().render_context()
        context["tag"] = self.tag
        context["body"] = self.render_body()
        return context

    def _render_children_head(self, response: "HeaderResponse") -> None:
        for child in self._children.values():
            child.render_head(response)
