"""Upgrade deprecated plan fields to their current location.

Rules run in table order. A deprecated field that is present always wins over
the current field it maps to, so a plan written for an older release keeps its
meaning when read by a newer one. The dashboard rule is the exception: the old
block is only honored when the current one is absent.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List

from .constants import LEGACY_PACKAGE_MANAGER_PROVIDER
from .models import Dashboard, Plan

logger = logging.getLogger("ketplan.plan.migrate")


@dataclass(frozen=True)
class MigrationRule:
    """A deprecated field and how to carry it into the current schema."""
    name: str
    applies: Callable[[Plan], bool]
    apply: Callable[[Plan], None]


def _has_legacy_package_manager(p: Plan) -> bool:
    return p.features is not None and p.features.package_manager is not None


def _migrate_package_manager(p: Plan) -> None:
    p.add_ons.package_manager.disable = not p.features.package_manager.enabled
    p.add_ons.package_manager.provider = LEGACY_PACKAGE_MANAGER_PROVIDER


def _has_allow_package_installation(p: Plan) -> bool:
    return p.cluster.allow_package_installation is not None


def _migrate_package_installation(p: Plan) -> None:
    p.cluster.disable_package_installation = not p.cluster.allow_package_installation


def _has_legacy_dashboard(p: Plan) -> bool:
    return p.add_ons.dashboard_deprecated is not None and p.add_ons.dashboard is None


def _migrate_dashboard(p: Plan) -> None:
    p.add_ons.dashboard = Dashboard(disable=p.add_ons.dashboard_deprecated.disable)


def _has_legacy_registry_address(p: Plan) -> bool:
    registry = p.docker_registry
    return not registry.server and bool(registry.address) and bool(registry.port)


def _migrate_registry_address(p: Plan) -> None:
    registry = p.docker_registry
    registry.server = f"{registry.address}:{registry.port}"


MIGRATION_RULES = (
    MigrationRule(
        name="features.package_manager",
        applies=_has_legacy_package_manager,
        apply=_migrate_package_manager,
    ),
    MigrationRule(
        name="cluster.allow_package_installation",
        applies=_has_allow_package_installation,
        apply=_migrate_package_installation,
    ),
    MigrationRule(
        name="add_ons.dashbard",
        applies=_has_legacy_dashboard,
        apply=_migrate_dashboard,
    ),
    MigrationRule(
        name="docker_registry.address",
        applies=_has_legacy_registry_address,
        apply=_migrate_registry_address,
    ),
)


def migrate(plan: Plan) -> List[str]:
    """Rewrite deprecated fields of ``plan`` in place.

    Returns:
        Names of the rules that fired, in the order they ran.
    """
    fired = []
    for rule in MIGRATION_RULES:
        if rule.applies(plan):
            rule.apply(plan)
            fired.append(rule.name)
            logger.info(f"Migrated deprecated plan field: {rule.name}")
    return fired
