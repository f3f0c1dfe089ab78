import logging
from pathlib import Path

import lsprotocol.types as L
from pygls.uris import to_fs_path

from garnet.document import URI, Document
from garnet.util import maybe

log = logging.getLogger(__name__)


class WorkspaceIndex:
    def __init__(
        self,
        encoding: L.PositionEncodingKind | str = L.PositionEncodingKind.Utf16,
    ) -> None:
        self.encoding = encoding
        self.docs: dict[URI, Document] = {}

    def load_source(self, uri: URI) -> str | None:
        path = Path(fs_path) if (fs_path := to_fs_path(uri)) else None
        return path.read_text(encoding="utf-8") if path and path.is_file() else None

    def load(self, uri: URI, source: str | None = None) -> Document | None:
        if source is None:
            source = self.load_source(uri)

        if source is None:
            log.warning("Cannot load document: %s", uri)
            return None

        log.debug("Loading document: %s", uri)
        self.docs[uri] = Document(uri, source, self.encoding)
        return self.docs[uri]

    def get_or_load(self, uri: URI, source: str | None = None) -> Document | None:
        if uri not in self.docs:
            return self.load(uri, source)
        return self.docs[uri]

    def evict(self, uri: URI):
        self.docs.pop(uri, None)

    def highlight(self, uri: URI, pos: L.Position) -> list[L.DocumentHighlight]:
        return [
            highlight
            for doc in maybe(self.docs.get(uri))
            for highlight in doc.highlight(pos)
        ]
