import tree_sitter as T
import tree_sitter_ruby as R


LANG_RUBY = T.Language(R.language())
RUBY_TS_PARSER = T.Parser(LANG_RUBY)


def parse_ruby(source: str) -> T.Node:
    return RUBY_TS_PARSER.parse(source.encode()).root_node
