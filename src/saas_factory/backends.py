"""Data backends: everything a request needs to read and change state.

A backend is chosen once per request. LiveBackend talks to the database and
the real external services; DemoBackend serves the shared in-memory demo store
with synthetic generation and deployment.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from .clients.llm import CodeGenerator, DemoCodeGenerator, LLMCodeGenerator
from .clients.progress_stream import ProgressStreamClient
from .config import Settings
from .repositories import (
    ActivityRepository,
    CategoryRepository,
    CollaboratorRepository,
    DemoStore,
    FavoriteRepository,
    GenerationLogRepository,
    ProjectRepository,
    ShareRepository,
    TemplateRepository,
)
from .repositories import memory, sql
from .services.deployment import Deployer, DemoDeployer, LiveDeployer
from .services.progress import NullProgressPublisher, ProgressPublisher, RedisProgressPublisher


class DataBackend:
    is_demo: bool = False

    projects: ProjectRepository
    logs: GenerationLogRepository
    activities: ActivityRepository
    shares: ShareRepository
    favorites: FavoriteRepository
    categories: CategoryRepository
    templates: TemplateRepository
    collaborators: CollaboratorRepository

    generator: CodeGenerator
    deployer: Deployer
    progress: ProgressPublisher
    # Set only when live progress streaming is configured
    progress_stream: ProgressStreamClient | None = None

    async def rollback(self) -> None:
        """Discard a failed write so the backend can be used again."""
        return None


class LiveBackend(DataBackend):
    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        progress_stream: ProgressStreamClient | None = None,
        generator: CodeGenerator | None = None,
        deployer: Deployer | None = None,
    ):
        self.session = session
        self.projects = sql.SqlProjectRepository(session)
        self.logs = sql.SqlGenerationLogRepository(session)
        self.activities = sql.SqlActivityRepository(session)
        self.shares = sql.SqlShareRepository(session)
        self.favorites = sql.SqlFavoriteRepository(session)
        self.categories = sql.SqlCategoryRepository(session)
        self.templates = sql.SqlTemplateRepository(session)
        self.collaborators = sql.SqlCollaboratorRepository(session)

        self.generator = generator or LLMCodeGenerator(settings)
        self.deployer = deployer or LiveDeployer()
        self.progress_stream = progress_stream
        self.progress = (
            RedisProgressPublisher(progress_stream) if progress_stream else NullProgressPublisher()
        )

    async def rollback(self) -> None:
        await self.session.rollback()


class DemoBackend(DataBackend):
    is_demo = True

    def __init__(self, store: DemoStore):
        self.store = store
        self.projects = memory.MemoryProjectRepository(store)
        self.logs = memory.MemoryGenerationLogRepository(store)
        self.activities = memory.MemoryActivityRepository(store)
        self.shares = memory.MemoryShareRepository(store)
        self.favorites = memory.MemoryFavoriteRepository(store)
        self.categories = memory.MemoryCategoryRepository(store)
        self.templates = memory.MemoryTemplateRepository(store)
        self.collaborators = memory.MemoryCollaboratorRepository(store)

        self.generator = DemoCodeGenerator()
        self.deployer = DemoDeployer()
        self.progress = NullProgressPublisher()
