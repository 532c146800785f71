"""Tree-sitter parser for Go source files."""
from pathlib import Path
from tree_sitter import Language, Parser, Tree
import tree_sitter_go as tsgo

from .errors import ParseError

GO_SUFFIX = '.go'


class LanguageParser:
    """Go parser using the tree-sitter v0.22+ API.

    Unlike a best-effort indexer, a file that does not parse cleanly is an
    error here: a partially recovered tree would silently drop declarations.
    """

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Factory method using the Parser(Language(capsule)) constructor.

        Returns:
            Configured Parser instance
        """
        return Parser(Language(tsgo.language()))

    def parse_source(self, source_code: bytes, file_path: str | Path = '<source>') -> Tree:
        """Parse in-memory source and return the tree.

        Args:
            source_code: Go source bytes
            file_path: Path used in error messages

        Returns:
            Parsed Tree object

        Raises:
            ParseError: If the tree contains syntax errors
        """
        tree = self.parser.parse(source_code)
        if tree.root_node.has_error:
            raise ParseError(file_path, self._describe_error(tree))
        return tree

    def parse_file(self, file_path: str | Path) -> tuple[Tree, bytes]:
        """Read and parse a file.

        Args:
            file_path: Path to a .go file

        Returns:
            (tree, source_code) tuple; the source is needed to read node text

        Raises:
            ParseError: If the file cannot be read or does not parse
        """
        try:
            with open(file_path, 'rb') as f:
                source_code = f.read()
        except OSError as e:
            raise ParseError(file_path, str(e)) from e
        return self.parse_source(source_code, file_path), source_code

    @staticmethod
    def _describe_error(tree: Tree) -> str:
        """Locate the first ERROR or MISSING node for the message."""
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if node.is_error or node.is_missing:
                line, column = node.start_point
                kind = f"missing {node.type}" if node.is_missing else "syntax error"
                return f"{kind} at line {line + 1}, column {column + 1}"
            if node.has_error:
                stack.extend(reversed(node.children))
        return "syntax error"


def node_text(node, source_code: bytes) -> str:
    """Decode the source slice covered by a node."""
    return source_code[node.start_byte:node.end_byte].decode('utf-8', errors='replace')
