import unittest
from textwrap import dedent

import lsprotocol.types as L
from rich.console import Console
from rich.text import Text

from garnet.ast import NodeKind
from garnet.highlight import collect
from garnet.locator import locate
from garnet.target import Highlight

from .dsl import FakeDocument, side_by_side

K = L.DocumentHighlightKind

TITLE_STYLE = "black on yellow"
READ_STYLE = "black on blue"
WRITE_STYLE = "black on red"


class TestHighlight(unittest.TestCase):
    def assertHighlightsEqual(
        self,
        doc: FakeDocument,
        obtained: list[Highlight],
        expected: list[Highlight],
    ):
        def render(highlights: list[Highlight]) -> Text:
            return doc.render(
                [
                    (h.span, WRITE_STYLE if h.kind == K.Write else READ_STYLE)
                    for h in highlights
                ]
            )

        def header(title: str) -> Text:
            return Text.styled(title + "\n", TITLE_STYLE)

        console = Console()

        with console.capture() as capture:
            console.print("\n")
            console.print(
                side_by_side(
                    header("Expected") + render(expected),
                    header("Obtained") + render(obtained),
                )
            )

        self.assertListEqual(obtained, expected, capture.get())

    def assertHighlighted(self, doc: FakeDocument, at: int, expected: list[Highlight]):
        self.assertHighlightsEqual(doc, doc.highlights(at), expected)

    def test_constant(self):
        t = FakeDocument(
            dedent(
                """\
                FOO = 1
                ^^^1
                def foo
                  FOO
                  ^^^2
                end
                """
            )
        )

        self.assertHighlighted(t, at=1, expected=[t.write(1), t.read(2)])
        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2)])

    def test_no_target(self):
        t = FakeDocument(
            dedent(
                """\
                FOO = 1
                    ^1
                def foo
                ^2
                  FOO
                end
                ^3
                """
            )
        )

        for mark in [1, 2, 3]:
            self.assertHighlighted(t, at=mark, expected=[])

    def test_comment(self):
        t = FakeDocument(
            dedent(
                """\
                # FOO
                  ^1
                FOO = 1
                """
            )
        )

        self.assertHighlighted(t, at=1, expected=[])

    def test_empty_document(self):
        t = FakeDocument("")
        self.assertListEqual(t.doc.highlight(L.Position(0, 0)), [])

    def test_instance_variable(self):
        t = FakeDocument(
            dedent(
                """\
                @x = 1
                ^^1
                @y = @x
                     ^^2
                $x = @x
                ^^3  ^^4
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2), t.read(4)])
        self.assertHighlighted(t, at=3, expected=[t.write(3)])

    def test_class_variable(self):
        t = FakeDocument(
            dedent(
                """\
                @@count = 0
                ^^^^^^^1
                @@count += 1
                ^^^^^^^2
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.write(1), t.write(2)])

    def test_global_variable(self):
        t = FakeDocument(
            dedent(
                """\
                $stdout.puts $verbose
                ^^^^^^^1     ^^^^^^^^2
                $verbose = true
                ^^^^^^^^3
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.read(2), t.write(3)])
        self.assertHighlighted(t, at=1, expected=[t.read(1)])

    def test_local_variable(self):
        t = FakeDocument(
            dedent(
                """\
                x = 1; x
                ^1     ^2
                """
            )
        )

        self.assertHighlighted(t, at=1, expected=[t.write(1), t.read(2)])
        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2)])

    def test_parameters(self):
        t = FakeDocument(
            dedent(
                """\
                def add(a, b = a)
                        ^1 ^2  ^3
                  a += b
                  ^4   ^5
                  a
                  ^6
                end
                """
            )
        )

        expected = [t.write(1), t.read(3), t.write(4), t.read(6)]
        for mark in [1, 3, 4, 6]:
            self.assertHighlighted(t, at=mark, expected=expected)

        self.assertHighlighted(t, at=2, expected=[t.write(2), t.read(5)])

    def test_block_parameter(self):
        t = FakeDocument(
            dedent(
                """\
                [1, 2].each do |n|
                                ^1
                  puts n
                       ^2
                end
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2)])

    def test_for_loop(self):
        t = FakeDocument(
            dedent(
                """\
                for i in 1..3
                    ^1
                  puts i
                       ^2
                end
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2)])

    def test_multiple_assignment(self):
        t = FakeDocument(
            dedent(
                """\
                a, b = 1, 2
                ^1 ^2
                b
                ^3
                """
            )
        )

        self.assertHighlighted(t, at=3, expected=[t.write(2), t.read(3)])
        self.assertHighlighted(t, at=1, expected=[t.write(1)])

    def test_rescue_variable(self):
        t = FakeDocument(
            dedent(
                """\
                begin
                rescue => e
                          ^1
                  e
                  ^2
                end
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2)])

    def test_interpolation(self):
        t = FakeDocument(
            dedent(
                """\
                name = "x"
                ^^^^1
                puts "#{name}"
                        ^^^^2
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2)])

    def test_pattern_matching(self):
        t = FakeDocument(
            dedent(
                """\
                case v
                in [x]
                    ^1
                  x
                  ^2
                in {y:}
                    ^3
                  y
                  ^4
                end
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2)])
        self.assertHighlighted(t, at=3, expected=[t.write(3), t.read(4)])

    def test_pinned_pattern(self):
        t = FakeDocument(
            dedent(
                """\
                x = 1
                ^1
                case 2
                in ^x
                    ^2
                end
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2)])

    def test_class_declaration(self):
        t = FakeDocument(
            dedent(
                """\
                class Foo
                      ^^^1
                end
                Foo.new
                ^^^2
                """
            )
        )

        self.assertHighlighted(t, at=2, expected=[t.write(1), t.read(2)])

    def test_method_name(self):
        t = FakeDocument(
            dedent(
                """\
                def foo
                    ^^^1
                end
                foo
                ^^^2
                """
            )
        )

        # A method name is not a variable, and only a bare identifier in an expression
        # position is treated as a local variable reference.
        self.assertHighlighted(t, at=1, expected=[])
        self.assertHighlighted(t, at=2, expected=[t.read(2)])

    def test_symbolic_equality(self):
        t = FakeDocument(
            dedent(
                """\
                @x = $x
                ^^1  ^^2
                x = @x
                ^3  ^^4
                """
            )
        )

        self.assertHighlighted(t, at=1, expected=[t.write(1), t.read(4)])
        self.assertHighlighted(t, at=2, expected=[t.read(2)])
        self.assertHighlighted(t, at=3, expected=[t.write(3)])

    def test_deterministic(self):
        t = FakeDocument(
            dedent(
                """\
                FOO = 1
                FOO += FOO
                       ^^^1
                """
            )
        )

        first = t.highlights(1)
        self.assertEqual(len(first), 3)
        self.assertListEqual(first, t.highlights(1))

    def test_source_order(self):
        t = FakeDocument(
            dedent(
                """\
                @a = 1
                def m(x = @a)
                  [@a, -> { @a }, @a += 1]
                end
                @a
                ^^1
                """
            )
        )

        obtained = t.highlights(1)
        self.assertEqual(len(obtained), 6)
        self.assertListEqual(obtained, sorted(obtained, key=lambda h: h.span))

    def test_self_inclusion(self):
        t = FakeDocument(
            dedent(
                """\
                FOO = @x + $y + @@z
                def bar(a, *rest, k: 1, &blk)
                  FOO.call(@x, a, rest, k, blk)
                  $y = @@z
                end
                """
            )
        )

        occurrences = [
            node
            for node in t.nodes()
            if node.kind in [NodeKind.VarField, NodeKind.VarRef]
        ]
        self.assertEqual(len(occurrences), 16)

        for node in occurrences:
            for offset in range(node.span.start, node.span.end):
                target = locate(t.tree, offset)
                assert target is not None, f"No target at {offset}"

                spans = [h.span for h in collect(t.tree, target)]
                self.assertEqual(spans.count(node.span), 1, f"{node.symbol} @ {offset}")
