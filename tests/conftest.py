import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve import create_app  # noqa: E402
from delve.routes import world_api  # noqa: E402
from delve.world import ChunkManager, WorldConfig  # noqa: E402
from tests.world_test_utils import TEST_SEED  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture(autouse=True)
def _fresh_world(_push_app_context):
    """Every test starts from an empty process world with a known seed."""
    world_api.reset_world(TEST_SEED)
    yield


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def manager():
    return ChunkManager(WorldConfig(seed=TEST_SEED))


def pytest_configure(config):  # register custom marker
    config.addinivalue_line("markers", "performance: generation timing guardrails")
