"""semanticmd.hooks: Call contracts for the four extension points.

Usage::

    from semanticmd import convert, Custom

    def keep_iframes(element, options, depth):
        if element.name == "iframe":
            return [Custom(payload=element.get("src", ""))]
        return None

    def render_iframe(node, options, depth):
        return f"[embedded]({node.payload})\\n\\n"

    convert(html, process_unhandled_element=keep_iframes,
            render_custom_node=render_iframe)

The hooks are plain callables; the ``runtime_checkable`` ``Protocol``
classes below exist so hosts can type their functions and use
``isinstance()`` checks in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bs4 import PageElement

    from semanticmd.nodes import Custom, Node
    from semanticmd.options import ConversionOptions

# ---------------------------------------------------------------------------
# Protocol definitions
# ---------------------------------------------------------------------------


@runtime_checkable
class ElementProcessor(Protocol):
    """Element-level hook used for ``override_element_processing`` and
    ``process_unhandled_element``.

    Returning ``None`` falls back to the built-in handling; any list
    (including an empty one) is used verbatim.
    """

    def __call__(
        self, element: PageElement, options: ConversionOptions, depth: int,
    ) -> list[Node] | None:
        ...


@runtime_checkable
class NodeRenderer(Protocol):
    """Renders one AST node; an empty string keeps the default rendering."""

    def __call__(self, node: Node, options: ConversionOptions, depth: int) -> str:
        ...


@runtime_checkable
class CustomNodeRenderer(Protocol):
    """Renders the payload of a :class:`~semanticmd.nodes.Custom` node."""

    def __call__(self, node: Custom, options: ConversionOptions, depth: int) -> str:
        ...
