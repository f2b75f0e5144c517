import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL

from userhub.api.v1.deps import get_media_host
from userhub.config import settings
from userhub.core import db as db_module
from userhub.main import app
from userhub.services import credential_store as store
from userhub.services.media_base import MediaHost, MediaHostError, UploadedMedia

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeMediaHost(MediaHost):
    """
    In-memory media host.
    Records every upload/delete and whether the local file existed at upload time.
    """

    def __init__(self):
        self.uploads: list[str] = []
        self.deleted: list[str] = []
        self.seen_paths: list[str] = []
        self.fail_uploads = False
        self.fail_upload_calls: set[int] = set()  # 1-based call numbers to refuse
        self.fail_deletes = False

    @property
    def name(self) -> str:
        return "fake"

    async def upload(self, local_path: str) -> UploadedMedia:
        assert os.path.exists(local_path), "upload called without a local file"
        self.seen_paths.append(local_path)
        if self.fail_uploads or len(self.seen_paths) in self.fail_upload_calls:
            raise MediaHostError("upload refused")
        public_id = f"media/{uuid.uuid4().hex}"
        url = f"https://res.cloudinary.com/test/image/upload/v1700000000/{public_id}.png"
        self.uploads.append(url)
        return UploadedMedia(url=url, public_id=public_id)

    async def delete(self, public_id: str, resource_type: str = "image") -> None:
        if self.fail_deletes:
            raise MediaHostError("delete refused")
        self.deleted.append(public_id)


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
def upload_tmp_dir(tmp_path, monkeypatch):
    """Spool multipart uploads into a per-test directory."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_tmp_dir", str(path))
    return path


@pytest.fixture
def media_host():
    return FakeMediaHost()


@pytest_asyncio.fixture
async def db():
    """Fresh database for tests that talk to the store directly."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(media_host):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB
    and the fake media host.
    """
    await _init_test_db()
    app.dependency_overrides[get_media_host] = lambda: media_host
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create users directly via the credential store.
    """

    async def _create_user(password: str = "UserPass!23", **overrides):
        suffix = uuid.uuid4().hex[:6]
        fields = {
            "username": f"user_{suffix}",
            "email": f"{suffix}@example.com",
            "fullname": f"User {suffix}",
            "avatar_url": f"https://res.cloudinary.com/test/image/upload/v1/media/{suffix}.png",
        }
        fields.update(overrides)
        user = await store.create(password=password, **fields)
        return user, password

    return _create_user


async def _register_user(
    client,
    username: str,
    email: str,
    password: str = "Secret123!",
    fullname: str = "Test User",
    avatar: bool = True,
    cover: bool = False,
):
    files = {}
    if avatar:
        files["avatar"] = ("avatar.png", PNG_BYTES, "image/png")
    if cover:
        files["coverImage"] = ("cover.png", PNG_BYTES, "image/png")
    return await client.post(
        "/api/v1/users/register",
        data={"username": username, "email": email, "fullname": fullname, "password": password},
        files=files or None,
    )


async def _login_user(client, password: str, username: str | None = None, email: str | None = None):
    payload = {"password": password}
    if username is not None:
        payload["username"] = username
    if email is not None:
        payload["email"] = email
    return await client.post("/api/v1/users/login", json=payload)


@pytest_asyncio.fixture
async def logged_in(client):
    """
    Factory: register + log in a user, return (login body data, bearer headers).
    """

    async def _logged_in(username: str | None = None, password: str = "Secret123!"):
        username = username or f"user_{uuid.uuid4().hex[:6]}"
        resp = await _register_user(client, username, f"{username}@example.com", password)
        assert resp.status_code == 201, resp.text
        login_resp = await _login_user(client, password, username=username)
        assert login_resp.status_code == 200, login_resp.text
        data = login_resp.json()["data"]
        return data, {"Authorization": f"Bearer {data['accessToken']}"}

    return _logged_in


@pytest.fixture
def register(client):
    """Helper fixture: POST a multipart registration (avatar attached by default)."""

    async def _register(username: str, email: str, **kwargs):
        return await _register_user(client, username, email, **kwargs)

    return _register


@pytest.fixture
def login(client):
    """Helper fixture: POST a JSON login by username and/or email."""

    async def _login(password: str, username: str | None = None, email: str | None = None):
        return await _login_user(client, password, username=username, email=email)

    return _login
