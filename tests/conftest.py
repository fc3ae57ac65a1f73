import os
import tempfile
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def _test_database_url() -> str:
    # File-backed so worker threads in the concurrency tests share one ledger
    url = os.environ.get("STOCKROOM_TEST_DATABASE_URL")
    if url:
        return url
    return f"sqlite:///{Path(tempfile.mkdtemp(prefix='stockroom-')) / 'ledger.db'}"


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Initialize the stockroom domain against the test database and push its
    domain_context. Modules imported during collection (e.g. the FastAPI
    app) then find the domain already initialized and keep its settings.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["STOCKROOM_ENV"] = session.config.option.env
    os.environ["STOCKROOM_DECISION_STORE"] = "memory"

    from stockroom.config import Config
    from stockroom.domain import initialize

    config = Config(env="test", database_url=_test_database_url(), decision_store="memory")
    stockroom = initialize(config)
    stockroom.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from stockroom.domain import stockroom
    from stockroom.utils.db import drop_db, setup_db

    setup_db(stockroom)

    yield

    drop_db(stockroom)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from stockroom.auth import reset_authenticator
    from stockroom.replenishment import reset_worklist
    from stockroom.replenishment.store import reset_decision_store
    from stockroom.utils.db import reset_db

    reset_db(current_domain)
    current_domain.event_store.store._data_reset()
    reset_decision_store()
    reset_worklist()
    reset_authenticator()
