import dataclasses as D
import logging
from enum import StrEnum
from typing import Callable, ClassVar

import tree_sitter as T

from garnet.pretty import PrettyTree, escape
from garnet.util import must

log = logging.getLogger(__name__)


def strip_comments(nodes: list[T.Node]) -> list[T.Node]:
    return [node for node in nodes if not node.type == "comment"]


class NodeKind(StrEnum):
    GlobalVar = "gvar"
    InstanceVar = "ivar"
    ClassVar = "cvar"
    Const = "const"
    Ident = "ident"

    # A binding site, e.g. the left-hand side of `=`, a loop variable, or a parameter.
    VarField = "var_field"

    # A read of a variable or a constant.
    VarRef = "var_ref"

    Other = "other"


class SymbolKind(StrEnum):
    Global = "global"
    Instance = "instance"
    Class = "class"
    Constant = "constant"
    Local = "local"


@D.dataclass(frozen=True)
class Symbol:
    kind: SymbolKind
    name: str

    def __str__(self) -> str:
        return f"{self.kind} {self.name}"


@D.dataclass(frozen=True, order=True)
class Span:
    """A half-open byte range in the source text."""

    start: int
    end: int

    def covers(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"

    @staticmethod
    def of(node: T.Node) -> "Span":
        return Span(node.start_byte, node.end_byte)


LowerCST = Callable[[T.Node], "Node"]


@D.dataclass
class Node:
    kind: NodeKind
    type: str
    span: Span
    name: str | None = None
    children: list["Node"] = D.field(default_factory=list)

    registry: ClassVar[dict[str, LowerCST]] = {}

    def __post_init__(self):
        self.parent: Node | None = None

        # Positional search relies on children being sorted by start offset. Trees
        # lowered from tree-sitter are already sorted, except for constructs like
        # heredoc bodies, which appear after the line that opens them.
        self.children.sort(key=lambda child: child.span.start)

        for child in self.children:
            child.parent = self

    @staticmethod
    def register(fn: LowerCST, *node_types: str):
        for node_type in node_types:
            assert node_type not in Node.registry, f'"{node_type}" already registered.'
            Node.registry[node_type] = fn

    @staticmethod
    def from_cst(node: T.Node) -> "Node":
        try:
            lower = Node.registry.get(node.type, other_from_cst)
            return lower(node)
        except Exception:
            span = Span.of(node)
            log.debug("Failed to lower %s [%s]", node.type, span, exc_info=True)
            return Node(NodeKind.Other, "ERROR", span)

    def to(self, expect_kind: NodeKind) -> "Node":
        if self.kind != expect_kind:
            raise TypeError(f"Expected {expect_kind.name}, but got {self.kind.name}")

        return self

    @property
    def symbol(self) -> Symbol | None:
        """The symbolic identity of this node, if it denotes a variable or constant."""
        match self.kind:
            case NodeKind.GlobalVar:
                return Symbol(SymbolKind.Global, must(self.name))
            case NodeKind.InstanceVar:
                return Symbol(SymbolKind.Instance, must(self.name))
            case NodeKind.ClassVar:
                return Symbol(SymbolKind.Class, must(self.name))
            case NodeKind.Const:
                return Symbol(SymbolKind.Constant, must(self.name))
            case NodeKind.Ident:
                return Symbol(SymbolKind.Local, must(self.name))
            case NodeKind.VarField | NodeKind.VarRef:
                (leaf,) = self.children
                return leaf.symbol
            case NodeKind.Other:
                return None

    @property
    def pretty_tree(self) -> str:
        return str(PrettyNode(self))


LEAF_KINDS: dict[str, NodeKind] = {
    "global_variable": NodeKind.GlobalVar,
    "instance_variable": NodeKind.InstanceVar,
    "class_variable": NodeKind.ClassVar,
    "constant": NodeKind.Const,
    "identifier": NodeKind.Ident,
}


def other_from_cst(node: T.Node, lower: LowerCST | None = None) -> Node:
    lower = lower or Node.from_cst
    return Node(
        kind=NodeKind.Other,
        type=node.type,
        span=Span.of(node),
        children=[lower(child) for child in strip_comments(node.named_children)],
    )


def fields_from_cst(node: T.Node, lowerers: dict[str, LowerCST]) -> Node:
    """Lowers `node` like `other_from_cst`, but lowers children under the given
    fields with the corresponding functions."""
    overrides = {
        child.id: fn
        for field, fn in lowerers.items()
        for child in node.children_by_field_name(field)
    }

    def lower(child: T.Node) -> Node:
        return overrides.get(child.id, Node.from_cst)(child)

    return other_from_cst(node, lower)


def leaf_from_cst(node: T.Node) -> Node:
    assert node.type in LEAF_KINDS
    assert node.text is not None
    return Node(LEAF_KINDS[node.type], node.type, Span.of(node), node.text.decode())


def name_from_cst(node: T.Node) -> Node:
    """Lowers a method name. Identifiers are left unwrapped, as they may just as well
    name a method as a local variable."""
    return leaf_from_cst(node) if node.type == "identifier" else Node.from_cst(node)


def var_ref_from_cst(node: T.Node) -> Node:
    leaf = leaf_from_cst(node)
    return Node(NodeKind.VarRef, "var_ref", leaf.span, children=[leaf])


Node.register(var_ref_from_cst, *LEAF_KINDS)


def var_field_from_cst(node: T.Node) -> Node:
    leaf = leaf_from_cst(node)
    return Node(NodeKind.VarField, "var_field", leaf.span, children=[leaf])


def target_from_cst(node: T.Node) -> Node:
    """Lowers a node sitting in an assignment-target position.

    Attribute and element targets like `a.b = 1` and `a[0] = 1` are not binding
    sites, and are lowered as plain expressions.
    """
    return var_field_from_cst(node) if node.type in LEAF_KINDS else Node.from_cst(node)


def targets_from_cst(node: T.Node) -> Node:
    return other_from_cst(node, target_from_cst)


Node.register(
    targets_from_cst,
    "left_assignment_list",
    "destructured_left_assignment",
    "rest_assignment",
    "exception_variable",
    "method_parameters",
    "lambda_parameters",
    "block_parameters",
    "destructured_parameter",
)


def assignment_from_cst(node: T.Node) -> Node:
    assert node.type in ["assignment", "operator_assignment"]
    return fields_from_cst(node, {"left": target_from_cst})


Node.register(assignment_from_cst, "assignment", "operator_assignment")


def for_from_cst(node: T.Node) -> Node:
    assert node.type == "for"
    return fields_from_cst(node, {"pattern": target_from_cst})


Node.register(for_from_cst, "for")


def param_from_cst(node: T.Node) -> Node:
    return fields_from_cst(node, {"name": target_from_cst})


Node.register(
    param_from_cst,
    "optional_parameter",
    "keyword_parameter",
    "splat_parameter",
    "hash_splat_parameter",
    "block_parameter",
)


def method_from_cst(node: T.Node) -> Node:
    assert node.type in ["method", "singleton_method"]
    return fields_from_cst(node, {"name": name_from_cst})


Node.register(method_from_cst, "method", "singleton_method")


def call_from_cst(node: T.Node) -> Node:
    assert node.type == "call"
    return fields_from_cst(node, {"method": name_from_cst})


Node.register(call_from_cst, "call")


def namespace_from_cst(node: T.Node) -> Node:
    # The constant named by a class or module declaration is bound by it.
    assert node.type in ["class", "module"]
    return fields_from_cst(node, {"name": target_from_cst})


Node.register(namespace_from_cst, "class", "module")


def pattern_from_cst(node: T.Node) -> Node:
    """Lowers a node sitting in a pattern position.

    Only bare identifiers bind variables in patterns. Constants like `in Integer` and
    pinned variables like `in ^x` are reads, and are lowered as plain expressions.
    """
    if node.type == "identifier":
        return var_field_from_cst(node)
    return Node.from_cst(node)


def patterns_from_cst(node: T.Node) -> Node:
    return other_from_cst(node, pattern_from_cst)


Node.register(
    patterns_from_cst,
    "array_pattern",
    "find_pattern",
    "alternative_pattern",
    "parenthesized_pattern",
)


def pattern_clause_from_cst(node: T.Node) -> Node:
    assert node.type in ["in_clause", "match_pattern", "test_pattern"]
    return fields_from_cst(node, {"pattern": pattern_from_cst})


Node.register(pattern_clause_from_cst, "in_clause", "match_pattern", "test_pattern")


def as_pattern_from_cst(node: T.Node) -> Node:
    assert node.type == "as_pattern"
    return fields_from_cst(node, {"value": pattern_from_cst, "name": pattern_from_cst})


Node.register(as_pattern_from_cst, "as_pattern")


def key_binding_from_cst(node: T.Node) -> Node:
    if node.type != "hash_key_symbol":
        return Node.from_cst(node)

    assert node.text is not None
    span = Span.of(node)
    leaf = Node(NodeKind.Ident, "identifier", span, node.text.decode())
    return Node(NodeKind.VarField, "var_field", span, children=[leaf])


def keyword_pattern_from_cst(node: T.Node) -> Node:
    assert node.type == "keyword_pattern"
    lowerers = {"value": pattern_from_cst}

    # A key without a value pattern, e.g. `in {a:}`, binds a local variable named
    # after the key.
    if node.child_by_field_name("value") is None:
        lowerers["key"] = key_binding_from_cst

    return fields_from_cst(node, lowerers)


Node.register(keyword_pattern_from_cst, "keyword_pattern")


@D.dataclass
class PrettyNode(PrettyTree):
    """A class for pretty-printing a lowered syntax tree."""

    node: Node

    def node_text(self) -> str:
        match self.node:
            case Node(kind=NodeKind.Other, type=node_type, span=span):
                return f"{node_type} [{span}]"
            case Node(kind=kind, name=None, span=span):
                return f"{kind.name} [{span}]"
            case Node(kind=kind, name=str() as name, span=span):
                return f"{kind.name} {escape(name)} [{span}]"
            case _:
                return str(self.node.span)

    def children(self) -> list[PrettyTree]:
        return [PrettyNode(child) for child in self.node.children]

    def __repr__(self):
        return super().__repr__()


@D.dataclass
class PrettyCST(PrettyTree):
    """A class for pretty-printing a tree-sitter CST."""

    node: T.Node
    label: str | None = None

    def node_text(self) -> str:
        if not self.node.is_named and self.node.text:
            repr = f"{escape(self.node.text.decode())} [{Span.of(self.node)}]"
        else:
            repr = f"{self.node.type} [{Span.of(self.node)}]"

        return repr if self.label is None else f"{self.label}={repr}"

    def children(self) -> list[PrettyTree]:
        return [
            PrettyCST(child, self.node.field_name_for_child(i))
            for i, child in enumerate(self.node.children)
        ]

    def __repr__(self):
        return super().__repr__()
