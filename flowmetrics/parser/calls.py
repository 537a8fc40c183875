"""Call extraction for function bodies and whole files.

Calls are attributed lexically: a function's call list only contains calls
written in its own body, never those inside nested function definitions,
which are extracted separately for the nested function.
"""

from typing import TYPE_CHECKING

from .models import CallKind, CallRecord
from .traversal import node_line, node_text, walk_scope

if TYPE_CHECKING:
    from tree_sitter import Node

# Host and runtime globals whose direct calls are never recorded.
DEFAULT_BUILTIN_CALLS: frozenset[str] = frozenset(
    {
        "console",
        "require",
        "setTimeout",
        "setInterval",
        "clearTimeout",
        "clearInterval",
        "Math",
        "Array",
        "Set",
        "Map",
        "Object",
        "parseInt",
        "parseFloat",
        "isNaN",
        "isFinite",
    }
)


def callee_name(call: "Node") -> tuple[str, CallKind] | None:
    """Name and kind of a call expression's callee.

    ``foo()`` gives ``("foo", DIRECT)``. ``obj.method()`` gives
    ``("obj.method", MEMBER)`` when the object is a plain identifier and
    ``("method", MEMBER)`` otherwise (``this.method()``, ``a.b.method()``).
    Any other callee shape yields None.
    """
    callee = call.child_by_field_name("function")
    if callee is None:
        return None

    if callee.type == "identifier":
        return node_text(callee), CallKind.DIRECT

    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        if prop is None:
            return None
        obj = callee.child_by_field_name("object")
        if obj is not None and obj.type == "identifier":
            return f"{node_text(obj)}.{node_text(prop)}", CallKind.MEMBER
        return node_text(prop), CallKind.MEMBER

    return None


class CallExtractor:
    """Collects calls from function bodies and files.

    Attributes:
        builtins: Direct-call names that are never recorded.
    """

    def __init__(self, builtins: frozenset[str] | set[str] = DEFAULT_BUILTIN_CALLS) -> None:
        self.builtins = frozenset(builtins)

    def is_builtin(self, name: str, kind: CallKind) -> bool:
        return kind == CallKind.DIRECT and name in self.builtins

    def extract(self, function: "Node") -> tuple[list[str], list[str]]:
        """Collect the calls made directly in a function's body.

        Args:
            function: A function definition node.

        Returns:
            Tuple of (calls, direct_calls). ``calls`` holds every recorded
            callee name in first-seen order; ``direct_calls`` the
            bare-identifier subset that makes up the function's fan-out.
        """
        calls: list[str] = []
        direct_calls: list[str] = []

        body = function.child_by_field_name("body")
        if body is None:
            return calls, direct_calls

        for node in walk_scope(body):
            if node.type != "call_expression":
                continue
            resolved = callee_name(node)
            if resolved is None:
                continue
            name, kind = resolved
            if self.is_builtin(name, kind) or name in calls:
                continue
            calls.append(name)
            if kind == CallKind.DIRECT:
                direct_calls.append(name)

        return calls, direct_calls

    def record(
        self,
        call: "Node",
        *,
        file_path: str,
        source_function: str | None,
    ) -> CallRecord | None:
        """Build a file-level record for one call expression.

        Returns None for unnamed callees and deny-listed built-ins.
        """
        resolved = callee_name(call)
        if resolved is None:
            return None
        name, kind = resolved
        if not name or self.is_builtin(name, kind):
            return None

        return CallRecord(
            source_file=file_path,
            source_function=source_function,
            target=name,
            line=node_line(call),
            column=call.start_point[1],
            kind=kind,
        )
