"""FastAPI dependencies wiring stores into the services.

Routes only depend on the service providers below. Tests swap the store
providers (``get_*_repo``) through ``app.dependency_overrides`` and every
service built on top picks up the fakes.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config import AdmissionMode, Settings, get_settings

from ..db import get_session
from ..repos.menu_repo import MenuRepo
from ..repos.orders_repo import OrdersRepo
from ..repos.settings_repo import SettingsRepo
from ..repos.tables_repo import TablesRepo
from ..repos_sqlalchemy.menu_repo_sql import MenuRepoSQL
from ..repos_sqlalchemy.orders_repo_sql import OrdersRepoSQL
from ..repos_sqlalchemy.settings_repo_sql import SettingsRepoSQL
from ..repos_sqlalchemy.tables_repo_sql import TablesRepoSQL
from ..security.admission import AdmissionGuard
from ..security.geofence import GeofenceStrategy
from ..security.network import SubnetStrategy
from ..services import AnalyticsService, OrderLifecycle, OrderValidator


def get_app_settings() -> Settings:
    return get_settings()


def get_tables_repo(session: AsyncSession = Depends(get_session)) -> TablesRepo:
    return TablesRepoSQL(session)


def get_menu_repo(session: AsyncSession = Depends(get_session)) -> MenuRepo:
    return MenuRepoSQL(session)


def get_orders_repo(session: AsyncSession = Depends(get_session)) -> OrdersRepo:
    return OrdersRepoSQL(session)


def get_settings_repo(session: AsyncSession = Depends(get_session)) -> SettingsRepo:
    return SettingsRepoSQL(session)


def build_guard(settings: Settings, settings_repo: SettingsRepo) -> AdmissionGuard:
    """Return the guard for the deployment's configured admission mode."""

    if settings.admission_mode == AdmissionMode.SUBNET:
        strategy = SubnetStrategy(settings.cafe_wifi_subnet)
    else:
        strategy = GeofenceStrategy(settings_repo)
    return AdmissionGuard(strategy, staff_key=settings.staff_key)


def get_admission_guard(
    settings: Settings = Depends(get_app_settings),
    settings_repo: SettingsRepo = Depends(get_settings_repo),
) -> AdmissionGuard:
    return build_guard(settings, settings_repo)


def get_order_validator(
    tables: TablesRepo = Depends(get_tables_repo),
    menu: MenuRepo = Depends(get_menu_repo),
) -> OrderValidator:
    return OrderValidator(tables, menu)


def get_order_lifecycle(
    orders: OrdersRepo = Depends(get_orders_repo),
    validator: OrderValidator = Depends(get_order_validator),
    guard: AdmissionGuard = Depends(get_admission_guard),
) -> OrderLifecycle:
    return OrderLifecycle(orders, validator, guard)


def get_analytics_service(
    orders: OrdersRepo = Depends(get_orders_repo),
    settings: Settings = Depends(get_app_settings),
) -> AnalyticsService:
    return AnalyticsService(orders, settings.cafe_utc_offset_minutes)
