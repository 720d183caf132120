"""Maintenance Plan: the fixed, ordered console commands run before serving traffic.

Invariants:
    - Order is fixed: migrations, cache clear, cache warmup, assets
    - Only the migration step tolerates failure
    - Every step runs through the Symfony console of the configured app

Design Decisions:
    - Frozen dataclasses: the plan is data, services/maintenance.py executes it
    - Asset installation is one step with two commands (assets + importmap)
"""

from dataclasses import dataclass

from containerboot.config import Settings

MIGRATIONS = "migrations"
CACHE_CLEAR = "cache-clear"
CACHE_WARMUP = "cache-warmup"
ASSETS = "assets"


@dataclass(frozen=True)
class MaintenanceStep:
    """One named maintenance operation."""
    name: str
    commands: tuple[tuple[str, ...], ...]
    description: str
    tolerate_failure: bool = False


def build_maintenance_plan(settings: Settings) -> list[MaintenanceStep]:
    """Return the four maintenance steps in execution order."""
    console = settings.console_command
    return [
        MaintenanceStep(
            name=MIGRATIONS,
            commands=(
                (*console, "doctrine:migrations:migrate",
                 "--no-interaction", "--allow-no-migration"),
            ),
            description="Running database migrations",
            tolerate_failure=True,
        ),
        MaintenanceStep(
            name=CACHE_CLEAR,
            commands=((*console, "cache:clear", "--no-warmup"),),
            description="Clearing cache",
        ),
        MaintenanceStep(
            name=CACHE_WARMUP,
            commands=((*console, "cache:warmup"),),
            description="Warming up cache",
        ),
        MaintenanceStep(
            name=ASSETS,
            commands=(
                (*console, "assets:install", "--no-interaction"),
                (*console, "importmap:install"),
            ),
            description="Installing assets",
        ),
    ]


def health_check_command(settings: Settings) -> tuple[str, ...]:
    """Console round-trip used by the console health probe."""
    return (*settings.console_command, "dbal:run-sql", "SELECT 1")
