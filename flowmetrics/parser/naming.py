"""Function identity resolution.

Every function definition receives exactly one name. Declared names are
used as-is; anonymous functions are named by walking their enclosing
context outward through a priority-ordered rule table:

1. variable binding initializer -> binding name
2. object-literal property or class field value -> key name
3. callback argument of ``object.method(...)`` -> ``object.method_<event>``
   where ``<event>`` is the first string-literal argument, or
   ``object.method_handler`` when there is none

The innermost ancestor is checked first and the first matching rule wins.
The walk stops at the enclosing function definition, so a function nested
inside another never borrows the outer function's binding.
When no rule matches, the name ``anonymous_<n>`` is synthesized from a
counter owned by the resolver, so one resolver must be used per file scan.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, NamedTuple

from .traversal import TraversalContext, is_function_node, node_text, same_node

if TYPE_CHECKING:
    from tree_sitter import Node


class NameMatch(NamedTuple):
    """A rule hit. ``name`` is None when the rule matched but the context
    offers no usable name (destructuring target, computed key)."""

    name: str | None


# (ancestor, child of ancestor on the path, function node) -> match or None
NamingRule = Callable[["Node", "Node", "Node"], NameMatch | None]

_DECLARED_NAME_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "generator_function",
    }
)


def string_value(node: "Node") -> str:
    """Contents of a string literal node without its quotes."""
    text = node_text(node)
    return text[1:-1] if len(text) >= 2 else text


def key_name(node: "Node | None") -> str | None:
    """Static name of a property key, None for computed keys."""
    if node is None:
        return None
    if node.type in ("property_identifier", "private_property_identifier", "identifier"):
        return node_text(node)
    if node.type == "string":
        return string_value(node)
    if node.type == "number":
        return node_text(node)
    return None


def declared_name(node: "Node") -> str | None:
    """Name written in the definition itself, if any."""
    if node.type in _DECLARED_NAME_TYPES:
        name_node = node.child_by_field_name("name")
        return node_text(name_node) or None
    if node.type == "method_definition":
        return key_name(node.child_by_field_name("name"))
    return None


def variable_binding_rule(ancestor: "Node", child: "Node", func: "Node") -> NameMatch | None:
    """``const name = function () {}``"""
    if ancestor.type != "variable_declarator":
        return None
    target = ancestor.child_by_field_name("name")
    if target is not None and target.type == "identifier":
        return NameMatch(node_text(target))
    return NameMatch(None)


def property_key_rule(ancestor: "Node", child: "Node", func: "Node") -> NameMatch | None:
    """``{ key: function () {} }`` and class fields ``key = () => {}``."""
    if ancestor.type == "pair":
        return NameMatch(key_name(ancestor.child_by_field_name("key")))
    if ancestor.type == "field_definition":
        return NameMatch(key_name(ancestor.child_by_field_name("property")))
    return None


def callback_registration_rule(
    ancestor: "Node", child: "Node", func: "Node"
) -> NameMatch | None:
    """``emitter.on('event', function () {})`` style registrations.

    Only matches when the function is itself an argument of the call, and
    the callee is a member access on a plain identifier.
    """
    if ancestor.type != "call_expression" or child.type != "arguments":
        return None
    if not any(same_node(arg, func) for arg in child.named_children):
        return None

    callee = ancestor.child_by_field_name("function")
    if callee is None or callee.type != "member_expression":
        return None

    obj = callee.child_by_field_name("object")
    prop = callee.child_by_field_name("property")
    if obj is None or prop is None or obj.type != "identifier":
        return None

    base = f"{node_text(obj)}.{node_text(prop)}"
    for arg in child.named_children:
        if arg.type == "string":
            return NameMatch(f"{base}_{string_value(arg)}")
    return NameMatch(f"{base}_handler")


NAMING_RULES: tuple[NamingRule, ...] = (
    variable_binding_rule,
    property_key_rule,
    callback_registration_rule,
)


class FunctionNameResolver:
    """Assigns names to function definitions within one file.

    Attributes:
        rules: Naming rules in priority order.
    """

    def __init__(self, rules: tuple[NamingRule, ...] = NAMING_RULES) -> None:
        self.rules = rules
        self._anonymous_counter = 0

    def resolve(self, node: "Node", context: TraversalContext) -> str:
        """Resolve the name of a function definition node.

        Args:
            node: A function definition node.
            context: Traversal context positioned at ``node``.

        Returns:
            The resolved function name.
        """
        name = declared_name(node)
        if name:
            return name

        scope = context.find_ancestor(node, lambda ancestor, _child: is_function_node(ancestor))
        for ancestor, child in context.walk_ancestors(node):
            if same_node(ancestor, scope):
                break
            for rule in self.rules:
                match = rule(ancestor, child, node)
                if match is not None:
                    return match.name or self.synthesize()

        return self.synthesize()

    def synthesize(self) -> str:
        """Next ``anonymous_<n>`` name for this file."""
        name = f"anonymous_{self._anonymous_counter}"
        self._anonymous_counter += 1
        return name
