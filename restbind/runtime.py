"""Transport contract imported by generated ``*_pb2_rest.py`` modules.

Generated code imports this module as ``rest``.  It only defines the
shapes a transport has to provide; request execution, routing and
serialization belong to the transport implementation.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

PROTOCOL = "rest"

Req = TypeVar("Req")
Res = TypeVar("Res")


class CallOption:
    """Marker base for per-call options passed through ``*opts``."""


@dataclass(frozen=True)
class StaticMethodCallOption(CallOption):
    """Signals that the method being called is known at generation time."""


def static_method() -> StaticMethodCallOption:
    return StaticMethodCallOption()


class ClientStream(abc.ABC):
    """Raw bidirectional message stream opened by a transport."""

    @abc.abstractmethod
    def send_msg(self, m: Any) -> None:
        raise NotImplementedError()

    @abc.abstractmethod
    def recv_msg(self, m: Any) -> None:
        """Fill ``m`` with the next message from the peer."""
        raise NotImplementedError()

    @abc.abstractmethod
    def close_send(self) -> None:
        raise NotImplementedError()


class ClientConnInterface(abc.ABC):
    """Connection handle the generated client holder calls into."""

    @abc.abstractmethod
    def invoke(self, ctx: Any, method: str, args: Any, reply: Any, *opts: CallOption) -> None:
        """Perform a unary call, filling ``reply`` with the decoded response."""
        raise NotImplementedError()

    @abc.abstractmethod
    def new_stream(
        self, ctx: Any, desc: "StreamDesc", method: str, *opts: CallOption
    ) -> ClientStream:
        raise NotImplementedError()


class EmbeddedClientStream(ClientStream):
    """Base for stream wrappers that delegate to a raw ``ClientStream``."""

    def __init__(self, client_stream: ClientStream) -> None:
        self.client_stream = client_stream

    def send_msg(self, m: Any) -> None:
        self.client_stream.send_msg(m)

    def recv_msg(self, m: Any) -> None:
        self.client_stream.recv_msg(m)

    def close_send(self) -> None:
        self.client_stream.close_send()


class ServerStreamingClient(ClientStream, Generic[Res]):
    @abc.abstractmethod
    def Recv(self) -> Res:
        raise NotImplementedError()


class ClientStreamingClient(ClientStream, Generic[Req, Res]):
    @abc.abstractmethod
    def Send(self, m: Req) -> None:
        raise NotImplementedError()

    @abc.abstractmethod
    def CloseAndRecv(self) -> Res:
        raise NotImplementedError()


class BidiStreamingClient(ClientStream, Generic[Req, Res]):
    @abc.abstractmethod
    def Send(self, m: Req) -> None:
        raise NotImplementedError()

    @abc.abstractmethod
    def Recv(self) -> Res:
        raise NotImplementedError()


class GenericClientStream(
    EmbeddedClientStream,
    ServerStreamingClient[Res],
    ClientStreamingClient[Req, Res],
    BidiStreamingClient[Req, Res],
):
    """Typed wrapper over a raw stream, usable for every streaming shape.

    ``response_type`` is instantiated for each received message.
    """

    def __init__(self, client_stream: ClientStream, response_type: Type[Res]) -> None:
        super().__init__(client_stream)
        self.response_type = response_type

    def Send(self, m: Req) -> None:
        self.client_stream.send_msg(m)

    def Recv(self) -> Res:
        m = self.response_type()
        self.client_stream.recv_msg(m)
        return m

    def CloseAndRecv(self) -> Res:
        self.client_stream.close_send()
        return self.Recv()


@dataclass(frozen=True)
class UnaryServerInfo:
    """Call metadata handed to a server interceptor."""

    server: Any
    full_method: str
    protocol: str = PROTOCOL


UnaryHandler = Callable[[Any, Any], Any]
UnaryServerInterceptor = Callable[[Any, Any, UnaryServerInfo, UnaryHandler], Any]
Handler = Callable[[Any, Any, Optional[UnaryServerInterceptor]], Any]


@dataclass(frozen=True)
class MethodDesc:
    """One HTTP route of a service."""

    method_name: str
    desc: str
    method: str
    path: str
    handler: Handler


@dataclass(frozen=True)
class StreamDesc:
    stream_name: str
    handler: Handler
    server_streams: bool = False
    client_streams: bool = False


@dataclass(frozen=True)
class ServiceDesc:
    """Route table registered with a rest server's ``add_handler``."""

    service_name: str
    handler_type: type
    methods: List[MethodDesc] = field(default_factory=list)
    streams: List[StreamDesc] = field(default_factory=list)

    def routes(self) -> List[tuple]:
        return [(desc.method, desc.path, desc.method_name) for desc in self.methods]


__all__ = [
    "PROTOCOL",
    "CallOption",
    "StaticMethodCallOption",
    "static_method",
    "ClientStream",
    "ClientConnInterface",
    "EmbeddedClientStream",
    "ServerStreamingClient",
    "ClientStreamingClient",
    "BidiStreamingClient",
    "GenericClientStream",
    "UnaryServerInfo",
    "UnaryHandler",
    "UnaryServerInterceptor",
    "MethodDesc",
    "StreamDesc",
    "ServiceDesc",
]
