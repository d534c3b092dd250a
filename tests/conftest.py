"""Pytest configuration for shared test markers and invariant validation."""

from pathlib import Path

import pytest

from tests.plan_invariants import INVARIANTS


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "invariant(invariant_id): map a test to a plan invariant ID from tests/plan_invariants.py",
    )


def _requires_invariant_marker(item) -> bool:
    path = getattr(item, "path", None)
    if path is None:
        path = Path(str(getattr(item, "fspath", "")))
    return Path(str(path)).name == "test_plan_invariants.py"


def pytest_collection_modifyitems(config, items):
    known_ids = set(INVARIANTS)
    for item in items:
        markers = list(item.iter_markers(name="invariant"))

        if _requires_invariant_marker(item) and not markers:
            raise pytest.UsageError(
                f"Missing invariant marker on {item.nodeid}. "
                "All tests in test_plan_invariants.py must declare @pytest.mark.invariant('INV-xxx')."
            )

        for marker in markers:
            if marker.kwargs or len(marker.args) != 1:
                raise pytest.UsageError(
                    f"Invalid invariant marker on {item.nodeid}. Use @pytest.mark.invariant('INV-xxx')."
                )
            invariant_id = marker.args[0]
            if not isinstance(invariant_id, str):
                raise pytest.UsageError(
                    f"Invalid invariant marker on {item.nodeid}. invariant_id must be a string."
                )
            if invariant_id not in known_ids:
                raise pytest.UsageError(
                    f"Unknown invariant id '{invariant_id}' on {item.nodeid}. "
                    "Add it to tests/plan_invariants.py."
                )
