# vdc/dal.py

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import grpc

from vdc import dal_proto

logger = logging.getLogger(__name__)

QUERY_SQL = "Select * From Messages"
MESSAGE_COLUMN = "msg"
MOCK_PAYLOAD = {"mgs": "Hello World"}


def mock_payload():
    return dict(MOCK_PAYLOAD)


class DalError(Exception):
    """Base class for everything that can go wrong talking to the dal"""


class DalConnectionError(DalError):
    """The dal could not be reached at startup"""


class DalResultError(DalError):
    """The dal answered, but not with something we can turn into a response"""


@dataclass
class QueryResult:
    columns: Dict[str, List[str]] = field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def from_response(cls, response):
        if response.HasField("error"):
            return cls(error=response.error.message)
        columns = {name: list(values.value) for name, values in response.result.result.items()}
        return cls(columns=columns)

    def first(self, column):
        """Returns the first value of a column"""
        values = self.columns.get(column)
        if values is None:
            raise DalResultError(f"column '{column}' missing from result")
        if not values:
            raise DalResultError(f"column '{column}' has no values")
        return values[0]


def connect_dal(target, timeout=5.0):
    """
    Opens the channel to the dal and waits until it is usable,
    so that a wrong address stops the service before it serves anything
    """
    channel = grpc.insecure_channel(target)
    try:
        grpc.channel_ready_future(channel).result(timeout=timeout)
    except grpc.FutureTimeoutError as e:
        channel.close()
        raise DalConnectionError(f"could not connect to dal at {target} within {timeout}s") from e
    logger.info(f"Connected to dal at {target}.")
    return channel


class DalClient:
    def __init__(self, channel):
        self._query = channel.unary_unary(
            dal_proto.QUERY_METHOD,
            request_serializer=dal_proto.QueryRequest.SerializeToString,
            response_deserializer=dal_proto.QueryResponse.FromString,
        )

    def query(self, sql):
        # no deadline, the call waits as long as the dal needs
        response = self._query(dal_proto.QueryRequest(sql=sql))
        return QueryResult.from_response(response)


class DalAdapter:
    """
    Asks the dal for the current message. Every failure is logged through
    the emitter and answered with the mock payload instead.
    """

    def __init__(self, client, emitter):
        self.client = client
        self.emitter = emitter

    def ask(self, headers):
        self.emitter.trace(headers, "vdc-dal-request")
        try:
            result = self.client.query(QUERY_SQL)
        except grpc.RpcError as e:
            self.emitter.trace(headers, "vdc-dal-response")
            self.emitter.log(f"failed to call dal {e}")
            return mock_payload()

        self.emitter.trace(headers, "vdc-dal-response")

        if result.error is not None:
            self.emitter.log(f"internal dal error {result.error}")
            return mock_payload()

        try:
            return {"mgs": result.first(MESSAGE_COLUMN)}
        except DalResultError as e:
            self.emitter.log(f"unusable dal result {e}")
            return mock_payload()
