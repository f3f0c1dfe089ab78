from rich.text import Text


class PrettyTree:
    """An abstract class for pretty-printing tree-like structures."""

    def node_text(self) -> str:
        """Returns a single-line string representing a tree node."""
        ...

    def children(self) -> list["PrettyTree"]:
        """Returns a list of child nodes."""
        ...

    def __repr__(self):
        def grow(lines: list[str], nodes: list[PrettyTree], branches: str = ""):
            for i, node in enumerate(nodes):
                last_child = i == len(nodes) - 1
                new_branch = ".   " if last_child else "|   "
                fork = "`-- " if last_child else "|-- "

                lines.append(f"{branches}{fork}{node.node_text()}")
                grow(lines, node.children(), branches + new_branch)

        lines = [self.node_text()]
        grow(lines, self.children())

        return "\n".join(lines)


ESCAPE_TABLE: dict[int, str] = str.maketrans(
    {"\n": r"\n", "\t": r"\t", "\r": r"\r", '"': r"\""}
)


def escape(s: str, size: int = 50) -> str:
    escaped = s[0:size].translate(ESCAPE_TABLE)
    postfix = "" if len(s) <= size else f"[{len(s) - size} characters]"
    return f'"{escaped}{postfix}"'


def render_source(
    source: str,
    ranges: list[tuple[int, int, str]],
    title: str | None = None,
) -> Text:
    """Renders a source document with the given character ranges styled.

    Each range is a `(start, end, style)` triple of character indices into `source`.
    The document is rendered with an optional title and a line number gutter:

    ```plaintext
    file:///tmp/test.rb   <-- Title
    1 |FOO = 1
    2 |def foo
    3 |  FOO
    4 |end
    ^^
      Line number gutter
    ```
    """
    styled = Text.styled
    rendered = []

    if title is not None:
        rendered.append(styled(title, "grey50"))

    rendered_source = styled(source, "default")
    for start, end, style in ranges:
        rendered_source.stylize(style, start=start, end=end)

    line_no_width = len(str(max(len(source.splitlines()), 1)))
    for i, line in enumerate(rendered_source.split()):
        line_no = styled(f"{i + 1:>{line_no_width}} |", "grey50")
        rendered.append(line_no + line)

    return Text("\n").join(rendered)
