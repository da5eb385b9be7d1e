import logging

import pytest
from pytest import fixture

from sfpermset.tests.util import create_context


@fixture
def bearer_context():
    return create_context(secrets={"BEARER_AUTH_TOKEN": "test-access-token"})


@fixture
def params():
    return {
        "username": "test.user@example.com",
        "permissionSetId": "0PS000000000001",
    }


@pytest.fixture(autouse=True)
def restore_package_logger():
    "init_logger() turns off propagation; put it back so caplog keeps working."
    logger = logging.getLogger("sfpermset")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    try:
        yield
    finally:
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate
