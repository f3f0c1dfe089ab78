from .fake_document import FakeDocument
from .util import side_by_side

__all__ = [
    "FakeDocument",
    "side_by_side",
]
