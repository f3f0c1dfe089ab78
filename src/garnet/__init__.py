import logging
import sys
from enum import StrEnum
from pathlib import Path
from textwrap import dedent
from typing import Annotated

import lsprotocol.types as L
import typer
from rich.console import Console

from garnet.ast import PrettyCST, PrettyNode
from garnet.document import Document

app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

READ_STYLE = "black on blue"
WRITE_STYLE = "black on red"


class LogLevel(StrEnum):
    Debug = "debug"
    Info = "info"
    Warning = "warning"
    Error = "error"


@app.callback()
def main(
    log_file: Annotated[
        Path,
        typer.Option(
            "--log-file",
            help="The file to write logs to. Stdout is reserved for the protocol.",
            dir_okay=False,
            writable=True,
        ),
    ] = Path("/tmp/garnet.log"),
    log_level: Annotated[
        LogLevel,
        typer.Option("--log-level", help="The minimum level of logs to write."),
    ] = LogLevel.Debug,
):
    logging.basicConfig(
        filename=log_file,
        filemode="w",
        level=log_level.upper(),
    )


@app.command()
def serve():
    """Starts the language server over stdio."""
    from garnet.server import server

    server.start_io()


class TreeType(StrEnum):
    Garnet = "g"
    TreeSitter = "t"


PathArgument = Annotated[
    Path,
    typer.Argument(
        help="The Ruby file to read.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        writable=False,
        allow_dash=True,
    ),
]


def load(path: Path) -> Document:
    if path == Path("-"):
        return Document("/dev/stdin", sys.stdin.read())
    else:
        return Document(path.absolute().as_uri(), path.read_text())


@app.command()
def tree(
    path: PathArgument,
    tree_type: Annotated[
        TreeType,
        typer.Option(
            "-t",
            "--tree-type",
            help=dedent(
                """\
                The type of tree to print:
                - `g`: The lowered syntax tree used for highlighting
                - `t`: The tree-sitter CST
                """
            ),
        ),
    ] = TreeType.Garnet,
):
    doc = load(path)

    match tree_type:
        case TreeType.Garnet:
            tree = PrettyNode(doc.tree)
        case TreeType.TreeSitter:
            tree = PrettyCST(doc.cst)

    Console(markup=False).print(tree)


@app.command()
def highlight(
    path: PathArgument,
    line: Annotated[int, typer.Argument(help="Zero-based line number.", min=0)],
    character: Annotated[
        int, typer.Argument(help="Zero-based UTF-16 character offset.", min=0)
    ],
):
    """Prints the occurrences of the symbol at the given position."""
    from garnet.pretty import render_source

    doc = load(path)
    highlights = doc.highlight(L.Position(line, character))
    console = Console()

    if len(highlights) == 0:
        console.print("Nothing to highlight.", style="grey50")
        raise typer.Exit(1)

    def style_of(kind: L.DocumentHighlightKind | None) -> str:
        return WRITE_STYLE if kind == L.DocumentHighlightKind.Write else READ_STYLE

    scanner = doc.scanner
    ranges = [
        (
            scanner.char_index(scanner.offset_of(h.range.start)),
            scanner.char_index(scanner.offset_of(h.range.end)),
            style_of(h.kind),
        )
        for h in highlights
    ]

    console.print(render_source(doc.source, ranges, title=doc.uri))

    for h in highlights:
        kind = L.DocumentHighlightKind(h.kind).name if h.kind else "Text"
        start, end = h.range.start, h.range.end
        console.print(
            f"{kind:<5} {start.line}:{start.character}-{end.line}:{end.character}"
        )


if __name__ == "__main__":
    app()
