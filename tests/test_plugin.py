"""Tests for the protoc plugin driver."""

import io
import sys
import types

from google.protobuf.compiler import plugin_pb2

from restbind import plugin


def _request(*files, generate=None, parameter=""):
    request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
    request.proto_file.extend(files)
    request.file_to_generate.extend(generate or [files[0].name])
    return request


def test_generates_one_module_per_file(greeter_proto):
    request = _request(greeter_proto)
    request.compiler_version.major = 5
    request.compiler_version.minor = 27
    request.compiler_version.patch = 0

    response = plugin.generate_response(request)

    assert not response.HasField("error")
    assert response.supported_features == plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    assert [f.name for f in response.file] == ["helloworld_pb2_rest.py"]
    assert "# - protoc             v5.27.0" in response.file[0].content


def test_unknown_compiler_version(greeter_proto):
    response = plugin.generate_response(_request(greeter_proto))
    assert "# - protoc             (unknown)" in response.file[0].content


def test_parameter_selects_legacy_streams(items_proto):
    response = plugin.generate_response(_request(items_proto, parameter="use_generic_streams=false"))
    assert "class itemsSyncClient(rest.EmbeddedClientStream, Items_SyncClient):" in (
        response.file[0].content
    )


def test_files_without_services_are_skipped(greeter_proto, protos):
    types_file = protos.make_file("types.proto", "types")
    protos.add_message(types_file, "Thing")
    request = _request(greeter_proto, types_file, generate=["types.proto", "helloworld.proto"])
    response = plugin.generate_response(request)
    assert [f.name for f in response.file] == ["helloworld_pb2_rest.py"]


def test_error_aborts_whole_run(greeter_proto, protos):
    broken = protos.make_file("broken.proto", "broken")
    protos.add_message(broken, "Req")
    service = broken.service.add(name="Broken")
    protos.add_method(service, "Call", ".broken.Req", ".broken.Req", http=[("TRACE", "/v1")])
    request = _request(greeter_proto, broken, generate=["helloworld.proto", "broken.proto"])

    response = plugin.generate_response(request)

    assert len(response.file) == 0
    assert "Unsupported custom HTTP verb 'TRACE'" in response.error
    assert "RB002" in response.error


def test_bad_parameter_is_reported(greeter_proto):
    response = plugin.generate_response(_request(greeter_proto, parameter="transport_module=1x"))
    assert len(response.file) == 0
    assert "transport_module" in response.error


def test_main_round_trips_stdin_stdout(greeter_proto, monkeypatch):
    stdin = types.SimpleNamespace(buffer=io.BytesIO(_request(greeter_proto).SerializeToString()))
    stdout = types.SimpleNamespace(buffer=io.BytesIO())
    monkeypatch.setattr(sys, "stdin", stdin)
    monkeypatch.setattr(sys, "stdout", stdout)

    plugin.main()

    response = plugin_pb2.CodeGeneratorResponse.FromString(stdout.buffer.getvalue())
    assert [f.name for f in response.file] == ["helloworld_pb2_rest.py"]
