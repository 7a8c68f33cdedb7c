import re
from typing import List, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.notifier import INotifier
from src.depends import get_notifier, get_unit_of_work
from src.domain.entities import User


class RecordingNotifier(INotifier):
    """Keeps sent emails in memory so tests can read reset links"""

    def __init__(self):
        self.sent: List[Tuple[str, str, str]] = []

    async def send_email(self, to: str, subject: str, body: str) -> None:
        self.sent.append((to, subject, body))

    def last_reset_token(self) -> str:
        _, _, body = self.sent[-1]
        return re.search(r"\?token=(\S+)", body).group(1)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(db_session, notifier):
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(client):
    """Register a user through the API and return the token pair"""

    async def _register(username="alice", email="alice@x.com", password="Passw0rd!", **extra):
        response = await client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def update_user(db_session):
    """Change a stored user directly, bypassing the API"""

    async def _update_user(username: str, **fields):
        user = (await db_session.exec(select(User).where(User.username == username))).one()
        for name, value in fields.items():
            setattr(user, name, value)
        db_session.add(user)
        await db_session.commit()

    return _update_user
