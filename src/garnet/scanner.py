import re
from bisect import bisect_right

import lsprotocol.types as L

from garnet.ast import Span

LINE_BREAK = re.compile(r"\r\n|\r|\n")


class Scanner:
    """Converts between LSP positions and UTF-8 byte offsets into a source text.

    The unit of `Position.character` follows the negotiated position encoding, which
    defaults to UTF-16 code units.
    """

    def __init__(
        self,
        source: str,
        encoding: L.PositionEncodingKind | str = L.PositionEncodingKind.Utf16,
    ) -> None:
        self.source = source
        self.encoding = encoding

        # Lines without line breaks, and the byte offset each line starts at.
        self.lines: list[str] = []
        self.line_offsets: list[int] = []

        start, offset = 0, 0
        for line_break in LINE_BREAK.finditer(source):
            self.lines.append(source[start : line_break.start()])
            self.line_offsets.append(offset)
            offset += len(source[start : line_break.end()].encode())
            start = line_break.end()

        self.lines.append(source[start:])
        self.line_offsets.append(offset)
        self.size = offset + len(source[start:].encode())

    def width(self, char: str) -> int:
        """Returns the number of position encoding units taken by `char`."""
        match self.encoding:
            case L.PositionEncodingKind.Utf8:
                return len(char.encode())
            case L.PositionEncodingKind.Utf32:
                return 1
            case _:
                return 2 if ord(char) > 0xFFFF else 1

    def offset_of(self, pos: L.Position) -> int:
        if pos.line >= len(self.lines):
            return self.size

        line = self.lines[pos.line]
        units, end = 0, 0

        # Positions beyond the end of the line clamp to the line end, and positions in
        # the middle of a character round down.
        while end < len(line):
            if (width := self.width(line[end])) + units > pos.character:
                break
            units += width
            end += 1

        return self.line_offsets[pos.line] + len(line[:end].encode())

    def position_of(self, offset: int) -> L.Position:
        offset = max(0, min(offset, self.size))
        line_no = bisect_right(self.line_offsets, offset) - 1

        # Offsets inside a line break, or inside a multi-byte character, round down.
        line_bytes = self.lines[line_no].encode()
        column = min(offset - self.line_offsets[line_no], len(line_bytes))
        prefix = line_bytes[:column].decode(errors="ignore")

        return L.Position(line_no, sum(map(self.width, prefix)))

    def range_of(self, span: Span) -> L.Range:
        return L.Range(self.position_of(span.start), self.position_of(span.end))

    def char_index(self, offset: int) -> int:
        """Returns the index into `source` of the character at byte `offset`."""
        return len(self.source.encode()[:offset].decode(errors="ignore"))
