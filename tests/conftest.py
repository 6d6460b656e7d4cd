import logging

import pytest

from tests.helpers import User, Admin


@pytest.fixture(scope="function")
def user():
    """A regular user with an email address."""
    return User(name="Ada", email="ada@example.com")


@pytest.fixture(scope="function")
def admin():
    """An admin, which is also a User."""
    return Admin(name="Grace", email=None, access_level="all_access")


@pytest.fixture(scope="function")
def debug_logs(caplog):
    """Capture lightserial DEBUG records."""
    caplog.set_level(logging.DEBUG, logger="lightserial")
    return caplog
