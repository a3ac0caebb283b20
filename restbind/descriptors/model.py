"""Dataclasses describing the services the compiler generates bindings for."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class Verb(str, Enum):
    """HTTP verbs a route entry can be bound to."""

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TypeRef:
    """Reference to a protobuf message type and the module that defines it."""

    full_name: str
    proto_file: str
    py_name: str


@dataclass(frozen=True)
class Comments:
    """Comments attached to a declaration in the ``.proto`` source."""

    leading: str = ""
    leading_detached: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.leading or self.leading_detached)


@dataclass(eq=False)
class HttpBinding:
    """One ``verb path`` binding declared on a method."""

    verb: Verb
    path: str
    method: Optional["Method"] = field(default=None, repr=False)


@dataclass(eq=False)
class Method:
    """A remote method of a service."""

    name: str
    input: TypeRef
    output: TypeRef
    client_streaming: bool = False
    server_streaming: bool = False
    comments: Comments = field(default_factory=Comments)
    deprecated: bool = False
    http_bindings: List[HttpBinding] = field(default_factory=list)
    parent: Optional["Service"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for binding in self.http_bindings:
            binding.method = self


@dataclass(eq=False)
class Service:
    """A service and its methods in declaration order."""

    name: str
    full_name: str
    methods: List[Method] = field(default_factory=list)
    comments: Comments = field(default_factory=Comments)
    deprecated: bool = False

    def __post_init__(self) -> None:
        for method in self.methods:
            method.parent = self


@dataclass
class ProtoFile:
    """A ``.proto`` file as seen by the generator."""

    name: str
    package: str = ""
    services: List[Service] = field(default_factory=list)
    deprecated: bool = False
    syntax_comments: Comments = field(default_factory=Comments)
    package_comments: Comments = field(default_factory=Comments)


__all__ = [
    "Verb",
    "TypeRef",
    "Comments",
    "HttpBinding",
    "Method",
    "Service",
    "ProtoFile",
]
