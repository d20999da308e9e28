from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from loggedin.config import Config
from loggedin.core.modules.limit.options import InMemoryOptionStore

if TYPE_CHECKING:
    from loggedin.core.modules.limit.service import LimitService
    from loggedin.core.modules.session.service import SessionService
    from loggedin.core.modules.user.service import UserService


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """The three services of the login flow, started in dependency order."""

    user: UserService
    session: SessionService
    limit: LimitService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        # Imported here: the service modules import Service from this module
        from loggedin.core.modules.limit.service import LimitService
        from loggedin.core.modules.session.service import SessionService
        from loggedin.core.modules.user.service import UserService

        self.user = UserService(database)
        self.session = SessionService(database)
        self.limit = LimitService(database)

    def in_start_order(self) -> list[Service]:
        """Users before sessions (sessions resolve users), sessions before the limit."""
        return [self.user, self.session, self.limit]

    def set_core(self, core: Core) -> None:
        for service in self.in_start_order():
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self.in_start_order():
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self.in_start_order()):
            await service.on_stop()


class Core:
    """Container providing config, database, runtime options, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    options: InMemoryOptionStore
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, option store, and services."""
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.options = InMemoryOptionStore(config.limit_options())
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.services.start_all()
        try:
            yield
        finally:
            await self.services.stop_all()
            await self.mongo_client.aclose()
