"""Tree traversal with an explicit ancestor stack.

Tree-sitter nodes are treated as read-only. Instead of attaching parent
references to nodes, traversal carries a :class:`TraversalContext` holding
the path from the root to the node being visited, so ancestor queries never
depend on state stored in the tree itself.
"""

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node

# Node types that open a new function scope for call attribution.
FUNCTION_NODE_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)


def is_function_node(node: "Node") -> bool:
    """Return True if the node defines a function.

    The ``function`` keyword is an anonymous token in the grammar, so only
    named nodes count.
    """
    return node.is_named and node.type in FUNCTION_NODE_TYPES


def node_text(node: "Node | None") -> str:
    """Decode the source text spanned by a node ('' for None)."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def node_line(node: "Node") -> int:
    """1-indexed start line of a node."""
    return node.start_point[0] + 1


def same_node(a: "Node | None", b: "Node | None") -> bool:
    """Identity comparison for tree-sitter nodes."""
    if a is None or b is None:
        return False
    return a.id == b.id


class TraversalContext:
    """Ancestor stack for the node currently being visited.

    ``ancestors[0]`` is the root and ``ancestors[-1]`` the direct parent.

    Attributes:
        ancestors: Nodes on the path from the root to the current node's
            parent.
    """

    def __init__(self, ancestors: list["Node"] | None = None) -> None:
        self.ancestors: list[Node] = list(ancestors or [])

    @property
    def parent(self) -> "Node | None":
        return self.ancestors[-1] if self.ancestors else None

    def walk_ancestors(self, node: "Node") -> Iterator[tuple["Node", "Node"]]:
        """Yield ``(ancestor, child_on_path)`` pairs, innermost first.

        ``child_on_path`` is the ancestor's child through which ``node`` is
        reached (``node`` itself for the direct parent).

        Args:
            node: The node whose ancestors are being walked.
        """
        child = node
        for ancestor in reversed(self.ancestors):
            yield ancestor, child
            child = ancestor

    def find_ancestor(
        self,
        node: "Node",
        predicate: Callable[["Node", "Node"], bool],
    ) -> "Node | None":
        """Walk ancestors outward until ``predicate(ancestor, child)`` holds."""
        for ancestor, child in self.walk_ancestors(node):
            if predicate(ancestor, child):
                return ancestor
        return None

    def enclosing_function(self) -> "Node | None":
        """Innermost ancestor that is a function definition, if any."""
        for ancestor in reversed(self.ancestors):
            if is_function_node(ancestor):
                return ancestor
        return None


def walk(root: "Node") -> Iterator[tuple["Node", TraversalContext]]:
    """Pre-order walk over every node below and including ``root``.

    The yielded context is shared and updated in place as the walk proceeds,
    so it is only valid until the next node is yielded.

    Args:
        root: Node to start from.

    Yields:
        ``(node, context)`` pairs in source order.
    """
    context = TraversalContext()
    stack: list[tuple[Node, int]] = [(root, 0)]

    while stack:
        node, depth = stack.pop()
        del context.ancestors[depth:]
        yield node, context
        context.ancestors.append(node)
        for child in reversed(node.children):
            stack.append((child, depth + 1))


def walk_scope(root: "Node") -> Iterator["Node"]:
    """Pre-order walk that does not descend into nested function definitions.

    If ``root`` itself is a function definition nothing is yielded, so an
    arrow function whose body is another arrow contributes no nodes.
    """
    stack: list[Node] = [root]

    while stack:
        node = stack.pop()
        if is_function_node(node):
            continue
        yield node
        for child in reversed(node.children):
            stack.append(child)
