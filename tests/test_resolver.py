"""Tests for go.mod based module path resolution."""
import pytest
from pathlib import Path

from refaudit.analyzer.resolver import ModulePathResolver, read_module_path


FIXTURES_DIR = Path(__file__).parent / 'fixtures'


@pytest.fixture
def resolver():
    ModulePathResolver.clear_cache()
    return ModulePathResolver()


@pytest.fixture
def module_tree(tmp_path):
    """example.com/tree with a nested module under nested/."""
    root = tmp_path / 'tree'
    (root / 'pkg' / 'sub').mkdir(parents=True)
    (root / 'nested' / 'inner').mkdir(parents=True)
    (root / 'go.mod').write_text("module example.com/tree\n\ngo 1.21\n")
    (root / 'nested' / 'go.mod').write_text('module "example.com/nested" // quoted\n')
    for rel in ('root.go', 'pkg/a.go', 'pkg/sub/b.go', 'nested/inner/c.go'):
        (root / rel).write_text("package x\n")
    return root


class TestResolve:
    """Mapping files to package import paths."""

    def test_fixture_library(self, resolver):
        """A package in the fixture library resolves to its import path."""
        path = FIXTURES_DIR / 'library' / 'dummy' / 'dummy.go'

        assert resolver.resolve(path) == 'example.com/library/dummy'

    def test_module_root(self, resolver, module_tree):
        """A file at the module root resolves to the bare module path."""
        assert resolver.resolve(module_tree / 'root.go') == 'example.com/tree'

    def test_subpackages(self, resolver, module_tree):
        """Subdirectories append their relative path to the module path."""
        assert resolver.resolve(module_tree / 'pkg' / 'a.go') == 'example.com/tree/pkg'
        assert resolver.resolve(module_tree / 'pkg' / 'sub' / 'b.go') == 'example.com/tree/pkg/sub'

    def test_nearest_go_mod_wins(self, resolver, module_tree):
        """A nested go.mod starts a new module."""
        path = module_tree / 'nested' / 'inner' / 'c.go'

        assert resolver.resolve(path) == 'example.com/nested/inner'


class TestSkippedFiles:
    """Files without a buildable package resolve to None."""

    def test_test_files(self, resolver):
        """Test files resolve to nothing."""
        path = FIXTURES_DIR / 'library' / 'dummy' / 'dummy_test.go'

        assert resolver.resolve(path) is None

    def test_testdata(self, resolver):
        """Files under testdata resolve to nothing."""
        path = FIXTURES_DIR / 'library' / 'testdata' / 'sample.go'

        assert resolver.resolve(path) is None

    def test_ignored_names(self, resolver, module_tree):
        """Paths with _ or . prefixed components resolve to nothing."""
        (module_tree / '_hidden').mkdir()
        (module_tree / '_hidden' / 'h.go').write_text("package h\n")
        (module_tree / '_gen.go').write_text("package x\n")

        assert resolver.resolve(module_tree / '_hidden' / 'h.go') is None
        assert resolver.resolve(module_tree / '_gen.go') is None

    def test_go_mod_without_module_directive(self, resolver, tmp_path):
        """A go.mod with no module line resolves to nothing."""
        (tmp_path / 'go.mod').write_text("go 1.21\n")
        (tmp_path / 'x.go').write_text("package x\n")

        assert resolver.resolve(tmp_path / 'x.go') is None


class TestReadModulePath:
    """Parsing the module directive."""

    def test_plain(self, tmp_path):
        """An unquoted module directive is read."""
        go_mod = tmp_path / 'go.mod'
        go_mod.write_text("// header\nmodule github.com/acme/widgets\n\ngo 1.22\n")

        assert read_module_path(go_mod) == 'github.com/acme/widgets'

    def test_quoted_with_comment(self, tmp_path):
        """A quoted module path with a trailing comment is read."""
        go_mod = tmp_path / 'go.mod'
        go_mod.write_text('module "github.com/acme/gadgets" // v2 soon\n')

        assert read_module_path(go_mod) == 'github.com/acme/gadgets'
