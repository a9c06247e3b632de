#-------------------------------------------------------------------------bh-
# pytest configuration and fixtures for the anonymizer tests
#-------------------------------------------------------------------------eh-

import pytest
import sys
from pathlib import Path

# Add project root and src to path for imports
PROJ_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJ_ROOT / 'src'))
sys.path.insert(0, str(PROJ_ROOT / 'tests'))

from fixtures.fake_gateway import FakeGateway
from fixtures.wordpress_db import create_wordpress_database


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep connection settings from the developer's shell out of tests."""
    for name in ('DB_ANON_CONNECTION', 'WP_DB_USER', 'WP_DB_PASSWORD',
                 'WP_DB_HOST', 'WP_DB_NAME', 'WP_TABLE_PREFIX'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_gateway():
    """Fake gateway whose users table has one row and whose writes all succeed."""
    return FakeGateway()


@pytest.fixture
def wp_url(tmp_path):
    """SQLAlchemy URL of a fresh SQLite file."""
    return f"sqlite:///{tmp_path / 'wordpress.db'}"


@pytest.fixture
def wp_engine(wp_url):
    """
    Provide a populated WordPress fixture database.

    Uses a file-backed SQLite database so every gateway call sees the same data.
    """
    engine = create_wordpress_database(wp_url)
    yield engine
    engine.dispose()


@pytest.fixture
def gateway(wp_engine):
    """StoreGateway bound to the fixture database."""
    from dbanon.session import StoreGateway
    return StoreGateway(wp_engine)
