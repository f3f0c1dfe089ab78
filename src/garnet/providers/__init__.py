from .document_highlight_provider import DocumentHighlightProvider

__all__ = [
    "DocumentHighlightProvider",
]
