import lsprotocol.types as L

from garnet.document import Document
from garnet.highlight import highlights


class DocumentHighlightProvider:
    def __init__(self, doc: Document) -> None:
        self.doc = doc

    def serve(self, pos: L.Position) -> list[L.DocumentHighlight]:
        scanner = self.doc.scanner
        return [
            L.DocumentHighlight(scanner.range_of(highlight.span), highlight.kind)
            for highlight in highlights(self.doc.tree, scanner.offset_of(pos))
        ]
