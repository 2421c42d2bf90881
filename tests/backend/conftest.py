import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from wordmate.config import settings
from wordmate.core import db as db_module
from wordmate.core.bootstrap import ensure_default_plans
from wordmate.core.security import hash_password
from wordmate.main import app
from wordmate.models.user import User
from wordmate.services.code_store import DbCodeStore


TEST_DB_URL = "sqlite://:memory:?cache=shared"
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL

ADMIN_KEY = "test-admin-key"


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest.fixture(autouse=True)
def test_settings(monkeypatch, tmp_path):
    """
    Known admin key, development-mode mail, database store, no order expiry.
    """
    monkeypatch.setattr(settings, "admin_secret_key", ADMIN_KEY)
    monkeypatch.setattr(settings, "resend_api_key", None)
    monkeypatch.setattr(settings, "code_store_backend", "db")
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "data"))
    monkeypatch.setattr(settings, "order_expire_minutes", 0)
    return settings


@pytest_asyncio.fixture
async def db():
    """
    Fresh schema with the default plan catalog seeded.
    """
    await _init_test_db()
    await ensure_default_plans()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create regular users directly.
    """

    async def _create_user(password: str = "UserPass!23") -> tuple[User, str]:
        user = await User.create(
            username=f"user_{uuid.uuid4().hex[:6]}",
            email=f"{uuid.uuid4().hex[:6]}@example.com",
            password_hash=hash_password(password),
            role="user",
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(username: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"username": username, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def make_code(db):
    """
    Factory fixture inserting a redemption code straight into the database store.
    """
    store = DbCodeStore()

    async def _make_code(code: str = "ABCD-EFGH-JKMN", **attrs):
        fields = {"code": code, "plan_name": "高级版", "period": "月付", "status": "unused"}
        fields.update(attrs)
        return await store.create_code(fields)

    return _make_code
