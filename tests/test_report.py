"""Tests for set differencing and report serialization."""
import json

from refaudit.analyzer.report import Report, diff


class TestDiff:
    """Exported minus imported."""

    def test_unused_exports(self):
        """Unused exports are the exported names nobody imports."""
        report = diff({'p.B', 'p.A', 'p.C'}, {'p.A', 'q.Z'})

        assert report.exported == ['p.A', 'p.B', 'p.C']
        assert report.imported == ['p.A', 'q.Z']
        assert report.unused_exports == ['p.B', 'p.C']

    def test_order_is_independent_of_input_order(self):
        """Output order does not depend on input order."""
        forward = diff(['b.X', 'a.Y', 'c.Z'], ['c.Z'])
        backward = diff(['c.Z', 'a.Y', 'b.X'], ['c.Z'])

        assert forward == backward

    def test_duplicates_collapse(self):
        """Repeated names appear once."""
        report = diff(['p.A', 'p.A'], ['p.A', 'p.A'])

        assert report.exported == ['p.A']
        assert report.imported == ['p.A']
        assert report.unused_exports == []

    def test_empty_inputs(self):
        """Empty inputs give an empty report."""
        assert diff(set(), set()) == Report()


class TestSerialization:
    """The JSON contract."""

    def test_keys(self):
        """The three keys come out in a fixed order."""
        report = diff({'p.A'}, set())

        assert list(report.to_dict()) == ['Exported', 'Imported', 'UnusedExports']

    def test_empty_lists_not_null(self):
        """Empty lists serialize as [] rather than null."""
        data = json.loads(diff(set(), set()).to_json())

        assert data == {'Exported': [], 'Imported': [], 'UnusedExports': []}

    def test_two_space_indent(self):
        """JSON is indented by two spaces."""
        text = diff({'p.A'}, set()).to_json()

        assert '\n  "Exported": [\n    "p.A"\n  ]' in text

    def test_non_ascii_names_written_raw(self):
        """Unicode identifiers appear as themselves, not as escapes."""
        text = diff({'example.com/p.Ñame'}, set()).to_json()

        assert '"example.com/p.Ñame"' in text
        assert '\\u00d1' not in text
