import lsprotocol.types as L

from garnet.ast import Node
from garnet.parsing import parse_ruby
from garnet.scanner import Scanner

URI = str


class Document:
    """A parsed Ruby source document. Immutable once loaded."""

    def __init__(
        self,
        uri: URI,
        source: str,
        encoding: L.PositionEncodingKind | str = L.PositionEncodingKind.Utf16,
    ) -> None:
        self.uri = uri
        self.source = source
        self.cst = parse_ruby(source)
        self.tree = Node.from_cst(self.cst)
        self.scanner = Scanner(source, encoding)

    def highlight(self, pos: L.Position) -> list[L.DocumentHighlight]:
        from garnet.providers import DocumentHighlightProvider

        return DocumentHighlightProvider(self).serve(pos)
