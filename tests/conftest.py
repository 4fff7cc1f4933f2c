import io
import os
from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone

# Settings are read once at import time; point them at test values first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from PIL import Image
from sqlalchemy import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from o2o_shop.core.storage_utils import ImageStorage, get_image_storage
from o2o_shop.database import get_session
from o2o_shop.main import app
from o2o_shop.repositories.product_repo import (
    ProductImageRepository,
    ProductRepository,
)
from o2o_shop.schemas.image import ImageHolder
from o2o_shop.services.product_service import ProductService

# Models will be registered on the metadata through these imports
from o2o_shop.models import headline, product, shop  # noqa: F401

_JWT_SECRET = "test-secret"


class FakeClock:
    """Deterministic clock; call advance() to move time forward."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def session() -> Generator[Session]:
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def image_dir(tmp_path) -> str:
    return str(tmp_path / "images")


@pytest.fixture
def storage(image_dir) -> ImageStorage:
    return ImageStorage(base_dir=image_dir)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 1, 9, 30, 0, tzinfo=timezone.utc))


@pytest.fixture
def service(storage: ImageStorage, clock: FakeClock) -> ProductService:
    return ProductService(
        ProductRepository(),
        ProductImageRepository(),
        storage,
        clock=clock,
    )


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    def _make(size: tuple[int, int] = (800, 600), fmt: str = "PNG", mode: str = "RGB") -> bytes:
        color = (200, 80, 40, 255) if mode == "RGBA" else (200, 80, 40)
        buffer = io.BytesIO()
        Image.new(mode, size, color).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_holder(make_image_bytes) -> Callable[..., ImageHolder]:
    def _make(name: str = "photo.png", **kwargs) -> ImageHolder:
        return ImageHolder(image_bytes=make_image_bytes(**kwargs), image_name=name)

    return _make


@pytest.fixture
def stored_files(image_dir) -> Callable[[], list[str]]:
    """Relative paths of every file currently in the image dir."""

    def _list() -> list[str]:
        root = os.path.abspath(image_dir)
        found = []
        for dirpath, _dirs, files in os.walk(root):
            for name in files:
                found.append(os.path.relpath(os.path.join(dirpath, name), root).replace(os.sep, "/"))
        return sorted(found)

    return _list


def make_token(role: str = "admin", sub: str = "owner-1") -> str:
    return jwt.encode({"sub": sub, "role": role}, _JWT_SECRET, algorithm="HS256")


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token('admin')}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token('user')}"}


@pytest.fixture
def client(session: Session, storage: ImageStorage) -> Generator[TestClient]:
    """TestClient wired to the test session and image storage (no lifespan)."""

    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_image_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
