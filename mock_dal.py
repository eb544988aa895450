# mock_dal.py
"""
A stand-in dal for local runs: answers every Query with one message,
or with an error descriptor when started with --error.
"""

import argparse
import logging
from concurrent import futures

import grpc

from vdc import dal_proto
from vdc.logs import configure_logging

logger = logging.getLogger(__name__)


class MockDal:
    def __init__(self, message="Hello from the mock dal!", error=None):
        self.message = message
        self.error = error

    def query(self, request, context):
        logger.info(f"Query received: {request.sql}")
        response = dal_proto.QueryResponse()
        if self.error:
            response.error.message = self.error
        else:
            response.result.result["msg"].value.append(self.message)
        return response


def build_server(dal, address="0.0.0.0:50055", max_workers=4):
    """Returns the unstarted server and the port it is bound to"""
    handler = grpc.method_handlers_generic_handler(dal_proto.SERVICE_NAME, {
        "Query": grpc.unary_unary_rpc_method_handler(
            dal.query,
            request_deserializer=dal_proto.QueryRequest.FromString,
            response_serializer=dal_proto.QueryResponse.SerializeToString,
        ),
    })
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=max_workers))
    server.add_generic_rpc_handlers((handler,))
    port = server.add_insecure_port(address)
    return server, port


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Mock dal query service")
    parser.add_argument("--address", default="0.0.0.0:50055")
    parser.add_argument("--message", default="Hello from the mock dal!")
    parser.add_argument("--error", default=None, help="answer every query with this error")
    args = parser.parse_args()

    configure_logging()
    server, port = build_server(MockDal(args.message, args.error), args.address)
    server.start()
    logger.info(f"mock dal listening on port {port}")
    server.wait_for_termination()
