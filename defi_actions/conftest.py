import pytest

from defi_actions.core.config import CONFIG, set_config


def pytest_configure(config):
    config.addinivalue_line("markers", "smoke: mark test as a smoke test")
    config.addinivalue_line("markers", "integration: mark test as integration")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "smoke" in item.nodeid:
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(autouse=True)
def isolated_config():
    """Tests start from an empty config and never leak edits into each other."""
    saved = dict(CONFIG)
    set_config({})
    yield CONFIG
    set_config(saved)
