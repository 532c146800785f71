"""Reference tracker for qualified `pkg.Name` usages of imported packages."""
import threading
from typing import Callable, Dict, Optional, Sequence, Set

from tree_sitter import Node, Tree

from .errors import AnalysisCancelled, PassError, RefAuditError
from .parser import LanguageParser, node_text
from .walker import run_on_files

# Import names that bind nothing selectable: `import . "x"` and `import _ "x"`
UNSELECTABLE_ALIASES = {'.', '_'}


def build_import_table(tree: Tree, source_code: bytes) -> Dict[str, str]:
    """Map local package names to import paths for one file.

    `import m "example.com/mod"` maps m -> example.com/mod; an unaliased
    import maps the last path segment.

    Args:
        tree: Parsed tree-sitter Tree
        source_code: Bytes the tree was parsed from

    Returns:
        Dict of alias -> import path
    """
    imports: Dict[str, str] = {}

    for decl in tree.root_node.named_children:
        if decl.type != 'import_declaration':
            continue

        specs = []
        for child in decl.named_children:
            if child.type == 'import_spec':
                specs.append(child)
            elif child.type == 'import_spec_list':
                specs.extend(c for c in child.named_children if c.type == 'import_spec')

        for spec in specs:
            path_node = spec.child_by_field_name('path')
            if path_node is None:
                continue
            import_path = node_text(path_node, source_code).strip('"`')

            name_node = spec.child_by_field_name('name')
            if name_node is not None:
                alias = node_text(name_node, source_code)
            else:
                alias = import_path.split('/')[-1]

            if alias in UNSELECTABLE_ALIASES:
                continue
            imports[alias] = import_path

    return imports


class ReferenceVisitor:
    """Records `base.Name` selectors whose base is an imported package.

    Anything else (locals, receivers, struct fields) has no entry in the
    file's import table and is ignored. That is also why promoted fields
    and method values reached through a variable are never counted.
    """

    def __init__(self, import_table: Dict[str, str], refs: Set[str]):
        self.import_table = import_table
        self.refs = refs
        self.handlers = {
            # pkg.Func(), pkg.Var, pkg.Const in expression position
            'selector_expression': self._visit_selector,
            # pkg.Type in type position
            'qualified_type': self._visit_qualified_type,
        }

    def visit(self, tree: Tree, source_code: bytes):
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            handler = self.handlers.get(node.type)
            if handler:
                handler(node, source_code)
            stack.extend(reversed(node.named_children))

    def _visit_selector(self, node: Node, source_code: bytes):
        operand = node.child_by_field_name('operand')
        field = node.child_by_field_name('field')
        if operand is None or field is None or operand.type != 'identifier':
            return
        self._add(node_text(operand, source_code), node_text(field, source_code))

    def _visit_qualified_type(self, node: Node, source_code: bytes):
        package = node.child_by_field_name('package')
        name = node.child_by_field_name('name')
        if package is None or name is None:
            return
        self._add(node_text(package, source_code), node_text(name, source_code))

    def _add(self, base: str, name: str):
        import_path = self.import_table.get(base)
        if import_path is not None:
            self.refs.add(f"{import_path}.{name}")


def find_imports(to_roots: Sequence[str], exclude_to: Sequence[str],
                 cancel: Optional[threading.Event] = None,
                 progress: Optional[Callable[[str], None]] = None) -> Set[str]:
    """Collect qualified names referenced beneath to_roots.

    Args:
        to_roots: Directories containing consumer code
        exclude_to: Absolute paths to leave out
        cancel: Cancellation token passed through to the walker
        progress: Called with each file path once it has been processed

    Returns:
        Set of "<import path>.<Name>" strings

    Raises:
        PassError: Wrapping the first WalkError or ParseError
        AnalysisCancelled: If cancel was set
    """
    refs: Set[str] = set()
    parser = LanguageParser()

    def scan(file_path: str):
        tree, source_code = parser.parse_file(file_path)
        # Built per file so aliases never leak between files
        import_table = build_import_table(tree, source_code)
        ReferenceVisitor(import_table, refs).visit(tree, source_code)
        if progress:
            progress(file_path)

    try:
        run_on_files(to_roots, exclude_to, scan, cancel=cancel)
    except AnalysisCancelled:
        raise
    except RefAuditError as e:
        raise PassError("find imports", e) from e
    return refs
