from typing import AsyncIterable

from dishka import provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from metad.config import Config
from metad.domain.metadata.port.repository import MetadataRepository
from metad.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from metad.infrastructure.persistence.repository.metadata import (
    SQLAlchemyMetadataRepository,
)
from metad.util.di.base import Provider
from metad.util.di.scope import Scope


class PersistenceProvider(Provider):
    # APP-scoped factories
    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterable[AsyncEngine]:
        engine = create_db_engine(config.database)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session: one transaction per unit of work, committed on exit
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    metadata_repo = provide(
        SQLAlchemyMetadataRepository, scope=Scope.UOW, provides=MetadataRepository
    )
