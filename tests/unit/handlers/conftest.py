import pytest

from shortie.dao.memory import TokenMemoryDAO
from shortie.service import ShortenService
from shortie.utils.config import Settings


@pytest.fixture(autouse=True)
def _app_env(monkeypatch):
    """Run handlers as deployed so unexpected errors become 500 responses."""
    monkeypatch.setenv('APP_ENV', 'test')


@pytest.fixture
def settings(tmp_path):
    return Settings(proto='https', domain='sho.rt', port=443, path='s', cleanup_interval=0, dump_file=str(tmp_path / 'urls.json'))


@pytest.fixture
def service(settings):
    store = TokenMemoryDAO(default_ttl=settings.default_ttl, cleanup_interval=settings.cleanup_interval)
    _service = ShortenService(store, settings)
    yield _service
    _service.close()
