"""Shared test fixtures for settings, async database sessions, staged shop builds and HTTP mocking."""

import json
import uuid
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from shop_deployer.core.config import Settings
from shop_deployer.models.base import Base
from shop_deployer.models.shop import Shop

INDEX_TEMPLATE = (
    "<html><head><title>TITLE</title>"
    '<meta name="description" content="META_DESC">'
    '<link rel="icon" href="DATA_DIR/FAVICON">'
    "</head><body data-network=\"NETWORK\" data-dir=\"DATA_DIR\"></body></html>"
)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Test application settings."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        database_url="sqlite+aiosqlite:///:memory:",
        dist_dir=str(tmp_path / "dist"),
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def sample_shop(async_session: AsyncSession) -> Shop:
    """Create a sample shop in the test database."""
    shop = Shop(id=uuid.uuid4(), name="Test Shop", data_dir="myshop", network_id=1)
    async_session.add(shop)
    await async_session.commit()
    await async_session.refresh(shop)
    return shop


@pytest.fixture
def shop_build(tmp_path: Path, settings: Settings) -> Path:
    """Lay out a dist dir and a shop output dir with a data directory.

    Returns:
        The shop output directory (contains ``data/``).
    """
    dist = Path(settings.dist_dir)
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text(INDEX_TEMPLATE, encoding="utf-8")
    (dist / "assets" / "app.js").write_text("console.log('shop')", encoding="utf-8")

    output_dir = tmp_path / "shops" / "myshop"
    data = output_dir / "data"
    data.mkdir(parents=True)
    (data / "config.json").write_text(
        json.dumps({"fullTitle": "My Shop", "metaDescription": "Great things", "favicon": "icon.png"}),
        encoding="utf-8",
    )
    (data / "products.json").write_text("[]", encoding="utf-8")
    return output_dir


MockHandler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def mock_http(monkeypatch: pytest.MonkeyPatch) -> Callable[[MockHandler], None]:
    """Route every ``httpx.AsyncClient`` created during the test to a handler.

    Usage: ``mock_http(handler)`` where ``handler(request) -> httpx.Response``.
    """
    real_client = httpx.AsyncClient

    def install(handler: MockHandler) -> None:
        def factory(*args: Any, **kwargs: Any) -> httpx.AsyncClient:
            kwargs["transport"] = httpx.MockTransport(handler)
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", factory)

    return install
