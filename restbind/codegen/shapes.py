"""Streaming-shape classification of remote methods."""

from __future__ import annotations

from enum import Enum

from ..descriptors.model import Method


class StreamShape(str, Enum):
    UNARY = "unary"
    CLIENT_STREAMING = "client_streaming"
    SERVER_STREAMING = "server_streaming"
    BIDI = "bidi"

    @property
    def client_streams(self) -> bool:
        return self in (StreamShape.CLIENT_STREAMING, StreamShape.BIDI)

    @property
    def server_streams(self) -> bool:
        return self in (StreamShape.SERVER_STREAMING, StreamShape.BIDI)

    @property
    def is_streaming(self) -> bool:
        return self is not StreamShape.UNARY

    # Operations a legacy stream wrapper exposes for this shape.

    @property
    def has_send(self) -> bool:
        return self.client_streams

    @property
    def has_recv(self) -> bool:
        return self.server_streams

    @property
    def has_close_and_recv(self) -> bool:
        return not self.server_streams


def classify(client_streaming: bool, server_streaming: bool) -> StreamShape:
    if client_streaming and server_streaming:
        return StreamShape.BIDI
    if client_streaming:
        return StreamShape.CLIENT_STREAMING
    if server_streaming:
        return StreamShape.SERVER_STREAMING
    return StreamShape.UNARY


def method_shape(method: Method) -> StreamShape:
    return classify(method.client_streaming, method.server_streaming)


__all__ = ["StreamShape", "classify", "method_shape"]
