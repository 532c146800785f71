"""Set differencing and the externally visible report."""
import json
from dataclasses import dataclass, field
from typing import Dict, Iterable, List


@dataclass
class Report:
    """Exported, imported, and unused qualified names, each sorted."""
    exported: List[str] = field(default_factory=list)
    imported: List[str] = field(default_factory=list)
    unused_exports: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        """Serializable form; the key names are part of the output contract."""
        return {
            'Exported': list(self.exported),
            'Imported': list(self.imported),
            'UnusedExports': list(self.unused_exports),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def diff(exports: Iterable[str], usages: Iterable[str]) -> Report:
    """Compute the report for an export set and a usage set.

    Args:
        exports: Qualified names exported by the "from" trees
        usages: Qualified names referenced by the "to" trees

    Returns:
        Report with lexicographically sorted, deduplicated lists, so two runs
        over the same inputs produce byte-identical output
    """
    exported = set(exports)
    imported = set(usages)
    return Report(
        exported=sorted(exported),
        imported=sorted(imported),
        unused_exports=sorted(exported - imported),
    )
