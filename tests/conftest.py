"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import invoice_roi...' works,
and provides shared fixtures: a temporary scenario store, sample payloads
and an API client wired to them.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from invoice_roi.core.models import DEFAULT_COST_MODEL, ScenarioInput  # noqa: E402
from invoice_roi.core.report import HtmlReportRenderer  # noqa: E402
from invoice_roi.core.storage import ScenarioStorage  # noqa: E402


@pytest.fixture
def example_payload():
    """The worked example: automation costs more than it saves."""
    return {
        "scenario_name": "Worked example",
        "monthly_invoice_volume": 1000,
        "num_ap_staff": 3,
        "avg_hours_per_invoice": 0.1,
        "hourly_wage": 20,
        "error_rate_manual": 0.05,
        "error_cost": 50,
        "time_horizon_months": 12,
        "one_time_implementation_cost": 5000,
    }


@pytest.fixture
def profitable_payload():
    """A scenario with positive monthly net savings (2800/month)."""
    return {
        "scenario_name": "Profitable",
        "monthly_invoice_volume": 1000,
        "num_ap_staff": 5,
        "avg_hours_per_invoice": 0.5,
        "hourly_wage": 30,
        "error_rate_manual": 0.05,
        "error_cost": 20,
        "time_horizon_months": 12,
        "one_time_implementation_cost": 10000,
    }


@pytest.fixture
def example_scenario(example_payload):
    return ScenarioInput(id="scn-example", **example_payload)


@pytest.fixture
def profitable_scenario(profitable_payload):
    return ScenarioInput(id="scn-profitable", **profitable_payload)


@pytest.fixture
def storage(tmp_path):
    return ScenarioStorage(tmp_path / "scenarios.db")


@pytest.fixture
def client(storage):
    """TestClient with storage, renderer, delivery and cost model overridden."""
    from fastapi.testclient import TestClient

    from invoice_roi.api import dependencies
    from invoice_roi.main import app

    app.dependency_overrides[dependencies.get_storage] = lambda: storage
    app.dependency_overrides[dependencies.get_renderer] = lambda: HtmlReportRenderer()
    app.dependency_overrides[dependencies.get_delivery] = lambda: None
    app.dependency_overrides[dependencies.get_cost_model] = lambda: DEFAULT_COST_MODEL

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
