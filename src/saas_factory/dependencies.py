"""FastAPI dependencies: caller identity and per-request backend."""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .backends import DataBackend, DemoBackend, LiveBackend
from .clients.progress_stream import ProgressStreamClient
from .config import Settings, get_settings
from .database import get_session_maker
from .demo_data import DEMO_PROJECT_PREFIX
from .errors import AuthenticationRequired
from .identity import DEMO_USER, CurrentUser
from .repositories import get_demo_store


@dataclass
class RequestContext:
    backend: DataBackend
    user: CurrentUser | None
    settings: Settings


def is_demo_project(project_id: str | None) -> bool:
    return bool(project_id) and project_id.startswith(DEMO_PROJECT_PREFIX)


def demo_context(settings: Settings) -> RequestContext:
    return RequestContext(DemoBackend(get_demo_store()), DEMO_USER, settings)


def get_db_session_maker() -> async_sessionmaker[AsyncSession]:
    return get_session_maker()


def get_progress_stream(request: Request) -> ProgressStreamClient | None:
    return getattr(request.app.state, "progress_stream", None)


@asynccontextmanager
async def open_context(
    request: Request,
    settings: Settings,
    session_maker: async_sessionmaker[AsyncSession],
    demo: bool,
    user_id: str | None,
    user_email: str | None,
    require_user: bool = True,
) -> AsyncIterator[RequestContext]:
    """Open the backend for one request.

    Demo requests act as the demo user. Live requests need the gateway's
    X-User-ID header unless `require_user` is False.
    """
    if settings.demo_mode or demo:
        yield demo_context(settings)
        return

    if not user_id and require_user:
        raise AuthenticationRequired()

    user = CurrentUser(id=user_id, email=user_email) if user_id else None
    async with session_maker() as session:
        backend = LiveBackend(session, settings, progress_stream=get_progress_stream(request))
        yield RequestContext(backend, user, settings)


async def get_context(
    request: Request,
    demo: bool = Query(False, description="Serve this request from demo data"),
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_db_session_maker),
) -> AsyncGenerator[RequestContext, None]:
    """Pick the backend for this request and identify the caller."""
    async with open_context(
        request, settings, session_maker, demo, x_user_id, x_user_email
    ) as ctx:
        yield ctx


async def get_public_context(
    request: Request,
    demo: bool = Query(False, description="Serve this request from demo data"),
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_db_session_maker),
) -> AsyncGenerator[RequestContext, None]:
    """Like get_context, for endpoints anonymous callers may use."""
    async with open_context(
        request, settings, session_maker, demo, x_user_id, x_user_email, require_user=False
    ) as ctx:
        yield ctx
