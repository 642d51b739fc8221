import os
import tempfile
import uuid

TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["ENV"] = "dev"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="whisper-uploads-"))
for _key in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"):
    os.environ.pop(_key, None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.api.v1.deps import blob_store_dependency
from app.config import settings
from app.core import db as db_module
from app.core.security import hash_password
from app.main import app
from app.models.user import User
from app.services.blob_base import BlobStore, BlobStoreError, ImageBlob

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL

# 1x1 transparent PNG
PNG_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


class FakeBlobStore(BlobStore):
    """In-memory blob store; flip ``fail`` to simulate an outage."""

    def __init__(self):
        self.uploads: list[ImageBlob] = []
        self.fail = False

    @property
    def name(self) -> str:
        return "Fake"

    def is_available(self) -> bool:
        return True

    async def upload(self, blob: ImageBlob) -> str:
        if self.fail:
            raise BlobStoreError("fake outage")
        self.uploads.append(blob)
        return f"https://blobs.test/{len(self.uploads)}.{blob.extension}"


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """Fresh database for store/service level tests."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest_asyncio.fixture
async def client(db, blob_store):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB
    and the fake blob store.
    """
    app.dependency_overrides[blob_store_dependency] = lambda: blob_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(password: str = "UserPass!23", full_name: str = "Test User") -> tuple[User, str]:
        user = await User.create(
            email=f"{uuid.uuid4().hex[:8]}@example.com",
            full_name=full_name,
            password_hash=hash_password(password),
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def signup(client):
    """
    Helper fixture: sign a user up through the API and return
    (user dict, headers carrying that user's session cookie).
    """

    async def _signup(full_name: str = "Test User", password: str = "secret1", email: str | None = None):
        email = email or f"{uuid.uuid4().hex[:8]}@example.com"
        resp = await client.post(
            "/api/auth/signup",
            json={"fullName": full_name, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        token = resp.cookies[settings.session_cookie_name]
        # Keep sessions explicit per request instead of the shared jar
        client.cookies.clear()
        return resp.json()["data"], _session_headers(token)

    return _signup


def _session_headers(token: str) -> dict[str, str]:
    return {"Cookie": f"{settings.session_cookie_name}={token}"}


@pytest.fixture
def session_headers():
    """Build request headers that carry a given session token."""
    return _session_headers


@pytest.fixture
def png_data_uri():
    return PNG_DATA_URI
