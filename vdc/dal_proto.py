# vdc/dal_proto.py
"""
Message types of the dal query service.

Equivalent to compiling this proto3 file, built at import time so the
package needs no protoc step:

    package dal;

    message QueryRequest { string sql = 1; }
    message Values { repeated string value = 1; }
    message ResultSet { map<string, Values> result = 1; }
    message Error { string message = 1; }
    message QueryResponse {
        ResultSet result = 1;
        Error error = 2;
    }

    service Dal {
        rpc Query (QueryRequest) returns (QueryResponse);
    }
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "dal"
SERVICE_NAME = f"{PACKAGE}.Dal"
QUERY_METHOD = f"/{SERVICE_NAME}/Query"

_Field = descriptor_pb2.FieldDescriptorProto


def _add_field(message, name, number, field_type, label=_Field.LABEL_OPTIONAL, type_name=None):
    field = message.field.add(name=name, number=number, type=field_type, label=label)
    if type_name:
        field.type_name = type_name
    return field


def _file_descriptor():
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="dal/dal.proto", package=PACKAGE, syntax="proto3"
    )

    query_request = file_proto.message_type.add(name="QueryRequest")
    _add_field(query_request, "sql", 1, _Field.TYPE_STRING)

    values = file_proto.message_type.add(name="Values")
    _add_field(values, "value", 1, _Field.TYPE_STRING, label=_Field.LABEL_REPEATED)

    result_set = file_proto.message_type.add(name="ResultSet")
    entry = result_set.nested_type.add(name="ResultEntry")
    entry.options.map_entry = True
    _add_field(entry, "key", 1, _Field.TYPE_STRING)
    _add_field(entry, "value", 2, _Field.TYPE_MESSAGE, type_name=".dal.Values")
    _add_field(result_set, "result", 1, _Field.TYPE_MESSAGE,
               label=_Field.LABEL_REPEATED, type_name=".dal.ResultSet.ResultEntry")

    error = file_proto.message_type.add(name="Error")
    _add_field(error, "message", 1, _Field.TYPE_STRING)

    query_response = file_proto.message_type.add(name="QueryResponse")
    _add_field(query_response, "result", 1, _Field.TYPE_MESSAGE, type_name=".dal.ResultSet")
    _add_field(query_response, "error", 2, _Field.TYPE_MESSAGE, type_name=".dal.Error")

    service = file_proto.service.add(name="Dal")
    service.method.add(name="Query", input_type=".dal.QueryRequest", output_type=".dal.QueryResponse")
    return file_proto


# a private pool keeps these names from clashing with a generated dal module
_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_file_descriptor().SerializeToString())


def _message(name):
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


QueryRequest = _message("QueryRequest")
Values = _message("Values")
ResultSet = _message("ResultSet")
Error = _message("Error")
QueryResponse = _message("QueryResponse")
