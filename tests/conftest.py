import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.main import app
from app.api.dependencies import get_miner_service
from app.core.config import Settings
from app.services.miners.miner_service import MinerService
from app.services.store.local import LocalFileStore


@pytest.fixture(scope="function", autouse=True)
async def initialize_tests():
    """Initialize test database before each test"""
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["app.models"]},
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(upload_dir=tmp_path / "uploads", storage_backend="local")


@pytest.fixture
def file_store(test_settings: Settings) -> LocalFileStore:
    return LocalFileStore(test_settings.upload_dir)


@pytest.fixture
def miner_service(test_settings: Settings, file_store: LocalFileStore) -> MinerService:
    return MinerService(settings=test_settings, file_store=file_store)


@pytest.fixture
async def client(miner_service: MinerService) -> AsyncGenerator:
    """Create async HTTP client for testing"""
    app.dependency_overrides[get_miner_service] = lambda: miner_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
