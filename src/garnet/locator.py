from bisect import bisect_right

from garnet.ast import Node, NodeKind
from garnet.target import Target


def child_at(node: Node, offset: int) -> Node | None:
    """Binary-searches the children of `node` for the one covering `offset`.

    Children are sorted by start offset and never overlap, so the only candidate is
    the last child starting at or before `offset`.
    """
    index = bisect_right(node.children, offset, key=lambda child: child.span.start)

    if index > 0 and (child := node.children[index - 1]).span.covers(offset):
        return child

    return None


def locate(root: Node, offset: int) -> Target | None:
    """Descends from `root` to the most specific highlightable node covering `offset`.

    The root itself is never a candidate, so a matched bare identifier always has a
    parent: the node whose children are being searched.
    """
    match child_at(root, offset):
        case Node(
            kind=NodeKind.GlobalVar
            | NodeKind.InstanceVar
            | NodeKind.ClassVar
            | NodeKind.Const
            | NodeKind.VarField
        ) as matched:
            return Target(matched)
        case Node(kind=NodeKind.Ident):
            # A bare identifier may be a local variable, a method name, or a parameter
            # name. The enclosing construct tells which.
            return Target(root)
        case Node() as matched:
            return locate(matched, offset)
        case None:
            return None
