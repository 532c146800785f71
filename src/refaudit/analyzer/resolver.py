import re
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

GO_MOD = 'go.mod'

_MODULE_DIRECTIVE = re.compile(r'^\s*module\s+("?)([^\s"]+)\1\s*(//.*)?$')


class ModulePathResolver:
    """
    Maps a Go source file to the import path of the package that owns it.
    Uses the nearest enclosing go.mod, the same way `go list` does in module mode.
    """

    def resolve(self, file_path: str | Path) -> Optional[str]:
        """
        Returns the package import path for file_path, or None when the file
        does not belong to a buildable package (test files, ignored
        directories, no enclosing module). None means "skip", never "fail".
        """
        path = Path(file_path).resolve()
        name = path.name
        if name.endswith('_test.go') or name.startswith(('.', '_')):
            return None

        found = _find_module(path.parent)
        if found is None:
            return None
        module_root, module_path = found

        rel_parts = path.parent.relative_to(module_root).parts
        for part in rel_parts:
            # The go tool ignores testdata and dot/underscore directories
            if part == 'testdata' or part.startswith(('.', '_')):
                return None

        if not rel_parts:
            return module_path
        return module_path + '/' + '/'.join(rel_parts)

    @staticmethod
    def clear_cache():
        _find_module.cache_clear()
        read_module_path.cache_clear()


@lru_cache(maxsize=4096)
def _find_module(directory: Path) -> Optional[Tuple[Path, str]]:
    """Nearest (module_root, module_path) at or above directory."""
    for candidate in (directory, *directory.parents):
        go_mod = candidate / GO_MOD
        if go_mod.is_file():
            module_path = read_module_path(go_mod)
            if module_path is None:
                return None
            return candidate, module_path
    return None


@lru_cache(maxsize=1024)
def read_module_path(go_mod: Path) -> Optional[str]:
    """Value of the `module` directive in a go.mod file, or None."""
    try:
        content = go_mod.read_text(encoding='utf-8', errors='replace')
    except OSError:
        return None
    for line in content.splitlines():
        match = _MODULE_DIRECTIVE.match(line)
        if match:
            return match.group(2)
    return None
