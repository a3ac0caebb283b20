"""Shared pytest fixtures: in-memory descriptors and a sandbox for generated code."""

import logging
import sys
import types
from typing import Iterable, Optional, Sequence, Tuple

import pytest
from google.api import annotations_pb2
from google.protobuf import descriptor_pb2

from restbind.config import GeneratorConfig
from restbind.descriptors import DescriptorAdapter

HttpSpec = Tuple[str, str]


def add_message(file_proto, name, nested: Iterable[str] = ()):
    message = file_proto.message_type.add(name=name)
    for inner in nested:
        message.nested_type.add(name=inner)
    return message


def add_method(
    service_proto,
    name: str,
    input_type: str,
    output_type: str,
    *,
    client_streaming: bool = False,
    server_streaming: bool = False,
    http: Sequence[HttpSpec] = (),
    deprecated: bool = False,
):
    """Add a method; ``http`` is ``(pattern, path)`` pairs, the first being the main rule."""
    method = service_proto.method.add(
        name=name,
        input_type=input_type,
        output_type=output_type,
        client_streaming=client_streaming,
        server_streaming=server_streaming,
    )
    if deprecated:
        method.options.deprecated = True
    if http:
        rule = method.options.Extensions[annotations_pb2.http]
        _set_pattern(rule, *http[0])
        for pattern, path in http[1:]:
            _set_pattern(rule.additional_bindings.add(), pattern, path)
    return method


def _set_pattern(rule, pattern: str, path: str) -> None:
    if pattern in ("get", "put", "post", "delete", "patch"):
        setattr(rule, pattern, path)
    else:
        rule.custom.kind = pattern
        rule.custom.path = path


def add_comment(file_proto, path: Sequence[int], leading: str, detached: Sequence[str] = ()):
    location = file_proto.source_code_info.location.add()
    location.path.extend(path)
    location.leading_comments = leading
    location.leading_detached_comments.extend(detached)
    return location


def make_file(name: str, package: str = "", deprecated: bool = False):
    file_proto = descriptor_pb2.FileDescriptorProto(name=name, package=package, syntax="proto3")
    if deprecated:
        file_proto.options.deprecated = True
    return file_proto


def adapt(*files, name: Optional[str] = None):
    """Adapt ``name`` (default: the first file) against all given files."""
    adapter = DescriptorAdapter(files)
    return adapter.adapt(name or files[0].name)


@pytest.fixture
def greeter_proto():
    """helloworld.proto: one unary method with a documented GET route."""
    file_proto = make_file("helloworld.proto", "helloworld")
    add_message(file_proto, "HelloRequest")
    add_message(file_proto, "HelloReply")
    service = file_proto.service.add(name="Greeter")
    add_method(
        service,
        "SayHello",
        ".helloworld.HelloRequest",
        ".helloworld.HelloReply",
        http=[("get", "/v1/hello/{name}")],
    )
    add_comment(file_proto, [6, 0], " The greeting service definition.\n")
    add_comment(file_proto, [6, 0, 2, 0], " Sends a greeting\n")
    return file_proto


@pytest.fixture
def greeter(greeter_proto):
    return adapt(greeter_proto)


@pytest.fixture
def chat_proto():
    """chat/v1/chat.proto: a bidi stream next to a unary method with two routes."""
    file_proto = make_file("chat/v1/chat.proto", "chat.v1")
    add_message(file_proto, "Message")
    add_message(file_proto, "Room", nested=["Member"])
    service = file_proto.service.add(name="Chat")
    add_method(
        service,
        "Converse",
        ".chat.v1.Message",
        ".chat.v1.Message",
        client_streaming=True,
        server_streaming=True,
    )
    add_method(
        service,
        "GetRoom",
        ".chat.v1.Room",
        ".chat.v1.Room",
        http=[("get", "/v1/rooms/{id}"), ("post", "/v1/rooms:get"), ("HEAD", "/v1/rooms/{id}")],
    )
    return file_proto


@pytest.fixture
def chat(chat_proto):
    return adapt(chat_proto)


@pytest.fixture
def items_proto():
    """items.proto: every streaming shape plus a deprecated unary method."""
    file_proto = make_file("items.proto", "shop")
    add_message(file_proto, "ListRequest")
    add_message(file_proto, "Item")
    add_message(file_proto, "Summary")
    service = file_proto.service.add(name="Items")
    add_method(
        service,
        "ListItems",
        ".shop.ListRequest",
        ".shop.Item",
        server_streaming=True,
        http=[("get", "/v1/items")],
    )
    add_method(service, "Upload", ".shop.Item", ".shop.Summary", client_streaming=True)
    add_method(
        service,
        "Sync",
        ".shop.Item",
        ".shop.Item",
        client_streaming=True,
        server_streaming=True,
    )
    add_method(
        service,
        "Count",
        ".shop.ListRequest",
        ".shop.Summary",
        http=[("post", "/v1/items:count")],
        deprecated=True,
    )
    return file_proto


@pytest.fixture
def items(items_proto):
    return adapt(items_proto)


@pytest.fixture
def legacy_config():
    return GeneratorConfig(use_generic_streams=False)


class FakeMessage:
    """Stand-in for a generated protobuf message class."""

    def __init__(self, **fields):
        self.fields = dict(fields)

    def __eq__(self, other):
        return type(self) is type(other) and self.fields == other.fields

    def __repr__(self):
        return f"{type(self).__name__}({self.fields!r})"


def fake_pb2_module(module_name: str, *message_names: str) -> types.ModuleType:
    module = types.ModuleType(module_name)
    for name in message_names:
        setattr(module, name, type(name, (FakeMessage,), {}))
    return module


@pytest.fixture
def load_generated(monkeypatch):
    """Execute generated source with fake ``_pb2`` modules importable.

    ``pb2_modules`` maps dotted module names to the message names they define.
    Returns the module namespace.
    """

    def _load(source: str, filename: str, pb2_modules: dict) -> dict:
        for module_name, message_names in pb2_modules.items():
            module = fake_pb2_module(module_name, *message_names)
            monkeypatch.setitem(sys.modules, module_name, module)
            package, _, leaf = module_name.rpartition(".")
            while package:
                parent = sys.modules.get(package)
                if parent is None:
                    parent = types.ModuleType(package)
                    parent.__path__ = []
                    monkeypatch.setitem(sys.modules, package, parent)
                monkeypatch.setattr(parent, leaf, module, raising=False)
                module = parent
                package, _, leaf = package.rpartition(".")
        namespace = {"__name__": filename.replace("/", ".")[:-3]}
        exec(compile(source, filename, "exec"), namespace)
        return namespace

    return _load


class FakeStream:
    """Raw client stream recording sends and replaying queued responses."""

    def __init__(self, responses=()):
        self.sent = []
        self.closed = False
        self.responses = list(responses)

    def send_msg(self, m):
        self.sent.append(m)

    def recv_msg(self, m):
        m.fields.update(self.responses.pop(0))

    def close_send(self):
        self.closed = True


class FakeConn:
    """Transport connection recording invocations."""

    def __init__(self, reply=None, stream=None, error=None):
        self.reply = reply or {}
        self.stream = stream or FakeStream()
        self.error = error
        self.calls = []

    def invoke(self, ctx, method, args, reply, *opts):
        self.calls.append(("invoke", ctx, method, args, opts))
        if self.error is not None:
            raise self.error
        reply.fields.update(self.reply)

    def new_stream(self, ctx, desc, method, *opts):
        self.calls.append(("new_stream", ctx, desc, method, opts))
        if self.error is not None:
            raise self.error
        return self.stream


@pytest.fixture
def protos():
    """Descriptor building helpers for tests that assemble their own files."""
    return types.SimpleNamespace(
        make_file=make_file,
        add_message=add_message,
        add_method=add_method,
        add_comment=add_comment,
        adapt=adapt,
    )


@pytest.fixture
def fakes():
    return types.SimpleNamespace(Conn=FakeConn, Stream=FakeStream, Message=FakeMessage)


@pytest.fixture(autouse=True)
def _reset_restbind_logging():
    """Drop handlers installed by configure_logging so they do not outlive a test."""
    yield
    logger = logging.getLogger("restbind")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)

