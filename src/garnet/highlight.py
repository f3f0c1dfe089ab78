from garnet.ast import Node
from garnet.locator import locate
from garnet.target import Highlight, Target
from garnet.util import maybe
from garnet.visitor import Visitor


class HighlightCollector(Visitor):
    def __init__(self, target: Target) -> None:
        self.target = target
        self.highlights: list[Highlight] = []

    def collect(self, root: Node) -> list[Highlight]:
        self.visit(root)
        return self.highlights

    def visit(self, node: Node):
        if (kind := self.target.classify(node)) is not None:
            self.highlights.append(Highlight(node.span, kind))

        super().visit(node)


def collect(root: Node, target: Target) -> list[Highlight]:
    return HighlightCollector(target).collect(root)


def highlights(root: Node, offset: int) -> list[Highlight]:
    """Returns all occurrences of the symbol at `offset`, in source order."""
    return [
        highlight
        for target in maybe(locate(root, offset))
        for highlight in collect(root, target)
    ]
