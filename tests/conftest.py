import logging

import pytest
import grpc
from unittest.mock import MagicMock, patch

from mock_dal import MockDal, build_server
from vdc import dal_proto
from vdc.config import Settings

COLLECTOR = "http://collector:9090"


class FakeRpcError(grpc.RpcError):
    def __str__(self):
        return "rpc error: code = Unavailable desc = connection refused"


def dal_response(message=None, error=None, columns=None):
    """Builds a QueryResponse the way the dal would send it"""
    response = dal_proto.QueryResponse()
    if error is not None:
        response.error.message = error
    if message is not None:
        response.result.result["msg"].value.append(message)
    for name, values in (columns or {}).items():
        response.result.result[name].value.extend(values)
    return response


# --- Fixtures ---

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keeps VDC_* variables of the surrounding shell out of the tests."""
    for name in ("VDC_PORT", "VDC_LOG", "VDC_TRACE", "VDC_DAL", "VDC_HOST",
                 "VDC_DAL_CONNECT_TIMEOUT", "VDC_LOG_LEVEL", "VDC_LEGACY_NOT_FOUND_STATUS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def posts():
    """Records every POST the emitter tries to send to the log agent."""
    with patch("vdc.emitter.requests.post") as post:
        yield post


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def fake_channel():
    """
    A channel whose Query stub returns whatever the test puts in
    fake_channel.query.return_value (or raises its side_effect).
    """
    channel = MagicMock()
    channel.query = MagicMock(return_value=dal_response(message="Hello World"))
    channel.unary_unary.return_value = channel.query
    return channel


@pytest.fixture
def dal_server():
    """Runs the mock dal in-process on a free port."""
    dal = MockDal(message="from the dal")
    server, port = build_server(dal, "127.0.0.1:0", max_workers=2)
    server.start()
    yield dal, f"127.0.0.1:{port}"
    server.stop(grace=None)


@pytest.fixture
def root_logging():
    """Puts the root logger back the way it was after configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
