"""Pytest fixtures for b2py tests."""
import pytest

from b2py import B2Client, B2Bucket, APIConfig

from fakes import FakeB2Server


@pytest.fixture
def server():
    """Fresh fake B2 service."""
    return FakeB2Server()


@pytest.fixture
def config():
    """Config with tiny transfer slices so progress fires several times."""
    return APIConfig(upload_chunk_size=4, download_chunk_size=4)


@pytest.fixture
def client(server, config):
    """Unauthorized session client wired to the fake server."""
    return B2Client(config, session=server.session, transfer_session=server.transfer_session)


@pytest.fixture
def bucket(client):
    """Unauthorized bucket facade wired to the fake server."""
    return B2Bucket(client=client)
