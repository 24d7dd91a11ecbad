import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.app_context import create_app_context
from core.config_manager import SystemConfig
from core.goals_repository import GoalRepository
from core.models import Goal, GoalMetric, GoalPeriod
from core.organization import OrganizationRepository
from core.store import MemoryStore


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Nothing a test does may touch the real data directory."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("ACELERA_DATA_DIR", str(data_dir))
    return data_dir


@pytest.fixture
def fast_config():
    return SystemConfig(
        AI_VALIDATION_MIN_DELAY_MS=1,
        AI_VALIDATION_MAX_DELAY_MS=5,
        VALIDATION_DEBOUNCE_SECONDS=0.01,
    )


@pytest.fixture
def organization():
    return OrganizationRepository()


@pytest.fixture
def goal_repo(organization):
    return GoalRepository(MemoryStore(), organization=organization)


@pytest.fixture
def context(fast_config):
    return create_app_context(
        config=fast_config,
        goals_store=MemoryStore(),
        auth_store=MemoryStore(),
    )


@pytest.fixture
def sales_goal():
    return Goal(
        id="goal-test",
        title="Incrementar ventas en 25%",
        description=(
            "Aumentar ingresos del equipo comercial mediante nuevas estrategias "
            "de venta en el territorio norte"
        ),
        period=GoalPeriod.TRIMESTRAL,
        start_date="2024-01-01",
        end_date="2024-03-31",
        metrics=[GoalMetric("Ventas", baseline=100, target=125, unit="K USD")],
        tags=["ventas"],
    )
