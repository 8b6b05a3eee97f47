import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Sets PROTEAN_ENV before any domain module is imported, so the domain
    and the storefront configuration both see the test environment.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def storefront_adapters():
    """Known configuration, and fresh payment gateway and email channel, for every test."""
    from notifications.channel import reset_channels
    from payments.gateway import reset_gateway
    from shared.config import StorefrontConfig, reset_config, set_config

    set_config(StorefrontConfig(environment="test"))
    reset_gateway()
    reset_channels()

    yield

    reset_gateway()
    reset_channels()
    reset_config()
