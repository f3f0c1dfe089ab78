import logging

import lsprotocol.types as L
from pygls.lsp.server import LanguageServer

from garnet.workspace_model import WorkspaceIndex

log = logging.root


class GarnetLanguageServer(LanguageServer):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.workspace_index = WorkspaceIndex()


server = GarnetLanguageServer("garnet", "v0.1")


@server.feature(L.INITIALIZE)
def initialize(ls: GarnetLanguageServer, params: L.InitializeParams):
    # pygls negotiates the position encoding and sets up the workspace with it before
    # calling this handler, and advertises the same encoding to the client.
    encoding = ls.workspace.position_encoding or L.PositionEncodingKind.Utf16
    log.info("Negotiated position encoding: %s", encoding)
    ls.workspace_index = WorkspaceIndex(encoding)


@server.feature(L.TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: GarnetLanguageServer, params: L.DidOpenTextDocumentParams):
    doc = params.text_document
    ls.workspace_index.load(doc.uri, doc.text)


@server.feature(L.TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: GarnetLanguageServer, params: L.DidChangeTextDocumentParams):
    # TODO: Patch the tree incrementally instead of re-parsing the whole document.
    doc = ls.workspace.get_text_document(params.text_document.uri)
    ls.workspace_index.load(doc.uri, doc.source)


@server.feature(L.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: GarnetLanguageServer, params: L.DidCloseTextDocumentParams):
    ls.workspace_index.evict(params.text_document.uri)


@server.feature(L.TEXT_DOCUMENT_DOCUMENT_HIGHLIGHT)
def document_highlight(ls: GarnetLanguageServer, params: L.DocumentHighlightParams):
    doc = ls.workspace.get_text_document(params.text_document.uri)
    ls.workspace_index.get_or_load(doc.uri, doc.source)
    return ls.workspace_index.highlight(doc.uri, params.position)
