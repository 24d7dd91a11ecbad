"""
Application wiring.

Builds the repositories and services once at startup and hands them to the
HTTP app and the CLI explicitly.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from core.auth_service import AuthService
from core.config_manager import SystemConfig, get_config
from core.goal_service import GoalService
from core.goals_repository import GoalRepository
from core.logger import get_logger
from core.organization import OrganizationRepository
from core.paths import get_data_dir
from core.store import JsonFileStore, Store

logger = get_logger("app_context")

GOALS_FILE = "goals.json"
AUTH_FILE = "auth.json"


@dataclass
class AppContext:
    config: SystemConfig
    organization: OrganizationRepository
    goals: GoalRepository
    auth: AuthService
    goal_service: GoalService


def create_app_context(
    data_dir: Optional[Path] = None,
    config: Optional[SystemConfig] = None,
    goals_store: Optional[Store] = None,
    auth_store: Optional[Store] = None,
    organization: Optional[OrganizationRepository] = None,
) -> AppContext:
    """
    Wire the application. Stores default to JSON files under the data dir
    (ACELERA_DATA_DIR or <project>/data).
    """
    config = config or get_config()
    base_dir = Path(data_dir) if data_dir is not None else get_data_dir()

    organization = organization or OrganizationRepository()
    goals = GoalRepository(
        goals_store or JsonFileStore(base_dir / GOALS_FILE),
        organization=organization,
        seed_on_empty=config.SEED_ON_EMPTY,
    )
    auth = AuthService(organization, auth_store or JsonFileStore(base_dir / AUTH_FILE))
    logger.info(f"Application context ready (data dir: {base_dir})")

    return AppContext(
        config=config,
        organization=organization,
        goals=goals,
        auth=auth,
        goal_service=GoalService(goals, config),
    )
