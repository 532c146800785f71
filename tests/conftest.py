import sys

import pytest


@pytest.hookimpl(tryfirst=True)
def pytest_sessionfinish(session, exitstatus):
    # The deep_tree fixture nests directories past the default recursion
    # limit; shutil.rmtree on Python < 3.12 recurses per level, so pytest's
    # own tmp_path cleanup needs headroom. Raised only after all tests ran
    # so the walker is still exercised under the default limit.
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))
