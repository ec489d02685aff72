from unittest.mock import MagicMock

import pytest

from sms_gateway import GatewayClient
from sms_types import ClientConfig


def make_response(text="", status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture
def config():
    return ClientConfig("http://gateway.test/", "Username", "Password", "SenderID")


@pytest.fixture
def session():
    session = MagicMock()
    session.get.return_value = make_response()
    return session


@pytest.fixture
def client(config, session):
    return GatewayClient(config, session=session)


@pytest.fixture
def respond(session):
    """Set the canned response returned by the mocked session."""
    def _respond(text="", status_code=200):
        session.get.return_value = make_response(text, status_code)
    return _respond
