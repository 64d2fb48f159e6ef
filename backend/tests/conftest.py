import pytest

from wrapped_api.config import Settings


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(_env_file=None, GITHUB_TOKEN=None, REPORT_TIMEZONE="UTC", CORS_ORIGINS="*")
