import dataclasses as D

import lsprotocol.types as L

from garnet.ast import Node, NodeKind, Span, Symbol


@D.dataclass(frozen=True)
class Highlight:
    span: Span
    kind: L.DocumentHighlightKind


@D.dataclass(frozen=True)
class Target:
    """The symbol the cursor points at, anchoring a highlight search."""

    node: Node
    symbol: Symbol | None = D.field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "symbol", self.node.symbol)

    def classify(self, candidate: Node) -> L.DocumentHighlightKind | None:
        """Returns the highlight kind of `candidate` if it is an occurrence of this
        target, or `None` otherwise.

        Only binding sites and references are occurrences. The leaves they wrap share
        their spans, and are skipped so that each occurrence is highlighted once.
        """
        from lsprotocol.types import DocumentHighlightKind as K

        if self.symbol is None or candidate.symbol != self.symbol:
            return None

        match candidate.kind:
            case NodeKind.VarField:
                return K.Write
            case NodeKind.VarRef:
                return K.Read
            case _:
                return None
