"""Exported top-level declaration extraction from Go syntax trees."""
import threading
from typing import Callable, Iterator, Optional, Sequence, Set

from tree_sitter import Node, Tree

from .errors import AnalysisCancelled, PassError, RefAuditError
from .parser import LanguageParser, node_text
from .resolver import ModulePathResolver
from .walker import run_on_files

BLANK_IDENTIFIER = '_'


def is_exported(name: str) -> bool:
    """Go exportedness: the identifier starts with an upper-case letter."""
    return bool(name) and name[0].isupper()


class ExportVisitor:
    """Records every exported top-level declaration of one file.

    Only direct children of the source file are considered; declarations
    nested in function bodies are local and never exported. Methods are not
    candidates either: they hang off a receiver type, not the package scope.
    """

    def __init__(self, module_path: str, exports: Set[str]):
        """Initialize visitor for one file.

        Args:
            module_path: Import path exported names are qualified with
            exports: Shared result set, mutated in place
        """
        self.module_path = module_path
        self.exports = exports
        # Identifiers already introduced in this file
        self.declared: Set[str] = set()

        # One handler per top-level declaration shape
        self.handlers = {
            'function_declaration': self._visit_function,
            'var_declaration': self._visit_value_group,
            'const_declaration': self._visit_value_group,
            'type_declaration': self._visit_type_group,
            'short_var_declaration': self._visit_short_var,
        }

    def visit(self, tree: Tree, source_code: bytes):
        """Walk the top-level declarations of a parsed file.

        Args:
            tree: Parsed tree-sitter Tree
            source_code: Bytes the tree was parsed from
        """
        for node in tree.root_node.named_children:
            handler = self.handlers.get(node.type)
            if handler:
                handler(node, source_code)

    def _visit_function(self, node: Node, source_code: bytes):
        self._add(node.child_by_field_name('name'), source_code)

    def _visit_value_group(self, node: Node, source_code: bytes):
        # var/const: `var A, B = ...` or a parenthesized group of specs
        for spec in _specs(node, ('var_spec', 'const_spec')):
            for name in spec.children_by_field_name('name'):
                self._add(name, source_code)

    def _visit_type_group(self, node: Node, source_code: bytes):
        for spec in _specs(node, ('type_spec', 'type_alias')):
            self._add(spec.child_by_field_name('name'), source_code)

    def _visit_short_var(self, node: Node, source_code: bytes):
        left = node.child_by_field_name('left')
        if left is None:
            return
        for name in left.named_children:
            self._add(name, source_code)

    def _add(self, ident: Optional[Node], source_code: bytes):
        if ident is None or ident.type not in ('identifier', 'type_identifier'):
            return
        name = node_text(ident, source_code)
        if name == BLANK_IDENTIFIER or name == '':
            return
        # Later occurrences of a name are not declaration sites
        if name in self.declared:
            return
        self.declared.add(name)
        if is_exported(name):
            self.exports.add(f"{self.module_path}.{name}")


def _specs(node: Node, kinds: Sequence[str]) -> Iterator[Node]:
    """Yield the spec nodes of a declaration, flattening `( ... )` groups."""
    for child in node.named_children:
        if child.type in kinds:
            yield child
        elif child.type.endswith('_list'):
            for grandchild in child.named_children:
                if grandchild.type in kinds:
                    yield grandchild


def find_exports(from_roots: Sequence[str], exclude_from: Sequence[str],
                 cancel: Optional[threading.Event] = None,
                 progress: Optional[Callable[[str], None]] = None) -> Set[str]:
    """Collect qualified names of every exported symbol beneath from_roots.

    Args:
        from_roots: Directories containing library code
        exclude_from: Absolute paths to leave out
        cancel: Cancellation token passed through to the walker
        progress: Called with each file path once it has been processed

    Returns:
        Set of "<module path>.<Identifier>" strings

    Raises:
        PassError: Wrapping the first WalkError or ParseError
        AnalysisCancelled: If cancel was set
    """
    exports: Set[str] = set()
    parser = LanguageParser()
    resolver = ModulePathResolver()

    def scan(file_path: str):
        tree, source_code = parser.parse_file(file_path)

        # find the public-facing package path for the file
        module_path = resolver.resolve(file_path)
        if module_path is not None:
            ExportVisitor(module_path, exports).visit(tree, source_code)
        # else: probably a test, or outside any module

        if progress:
            progress(file_path)

    try:
        run_on_files(from_roots, exclude_from, scan, cancel=cancel)
    except AnalysisCancelled:
        raise
    except RefAuditError as e:
        raise PassError("find exports", e) from e
    return exports
