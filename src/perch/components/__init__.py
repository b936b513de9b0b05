"""Component tree: components, containers, pages, and basic widgets."""

from perch.components.component import Component, Container
from perch.components.page import Page

__all__ = ["Component", "Container", "Page"]
