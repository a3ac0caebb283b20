"""Client binding generation.

For every service the generator emits a client interface, a holder type
carrying the transport handle, a constructor, and one call wrapper per
method.  Streaming methods either reuse the transport's generic stream
types (one alias each, kept for code that still uses the legacy name) or,
in legacy mode, get a named interface and a concrete wrapper exposing
exactly the operations their shape allows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from ..config import GeneratorConfig
from ..descriptors.model import Method, Service
from ..errors import NameCollisionError
from . import naming
from .printer import Declaration, DeclKind, comment_lines, indent_lines
from .shapes import StreamShape, method_shape

logger = logging.getLogger(__name__)

DEPRECATION_COMMENT = "# Deprecated: Do not use."
ALIAS_COMMENT = (
    "# This type alias is provided for backwards compatibility with existing code "
    "that references the prior non-generic stream type by name."
)

# Attributes every generated client holder defines besides the rpc methods.
HOLDER_MEMBERS = frozenset({"cc", "__init__"})


@dataclass
class GeneratedClientBinding:
    interface_type: str
    holder_type: str
    interface: Declaration
    holder: Declaration
    constructor: Declaration
    methods: List[Declaration] = field(default_factory=list)
    stream_types: List[Declaration] = field(default_factory=list)
    aliases: List[Declaration] = field(default_factory=list)

    def declarations(self) -> List[Declaration]:
        return [
            self.interface,
            self.holder,
            self.constructor,
            *self.stream_types,
            *self.aliases,
        ]


def _type(ref) -> str:
    return naming.qualified_type(ref.proto_file, ref.py_name)


def client_signature(method: Method) -> str:
    shape = method_shape(method)
    params = ["self", "ctx"]
    if not shape.client_streams:
        params.append("in_")
    params.append("*opts")
    return f"def {method.name}({', '.join(params)}):"


def client_stream_interface(method: Method) -> str:
    """The generic stream type a streaming call returns."""
    shape = method_shape(method)
    request, response = _type(method.input), _type(method.output)
    if shape is StreamShape.BIDI:
        return f"rest.BidiStreamingClient[{request}, {response}]"
    if shape is StreamShape.CLIENT_STREAMING:
        return f"rest.ClientStreamingClient[{request}, {response}]"
    return f"rest.ServerStreamingClient[{response}]"


class ClientBindingGenerator:
    """Emits the client half of a service's bindings."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    def generate(self, service: Service, scope: naming.SymbolScope) -> GeneratedClientBinding:
        interface_type = scope.claim(
            naming.client_interface_name(service.name), f"service {service.name}"
        )
        holder_type = scope.claim(
            naming.client_holder_name(service.name), f"service {service.name}"
        )
        constructor_name = scope.claim(
            naming.client_constructor_name(service.name), f"service {service.name}"
        )

        methods: List[Declaration] = []
        stream_types: List[Declaration] = []
        aliases: List[Declaration] = []
        stream_index = 0
        for method in service.methods:
            if method.name in HOLDER_MEMBERS:
                raise NameCollisionError(
                    f"Method '{method.name}' would replace the '{method.name}' "
                    f"attribute of {holder_type}",
                    path=scope.path,
                    service=service.name,
                    method=method.name,
                    hint="Rename the rpc; generated clients reserve "
                    + ", ".join(sorted(HOLDER_MEMBERS)),
                )
            shape = method_shape(method)
            if not shape.is_streaming:
                methods.append(self._unary_call(service, method))
                continue
            methods.append(self._streaming_call(service, method, stream_index))
            stream_index += 1
            owner = f"method {service.name}.{method.name}"
            scope.claim(naming.stream_interface_name(service.name, method.name), owner)
            if self.config.use_generic_streams:
                aliases.append(self._stream_alias(service, method))
            else:
                scope.claim(naming.stream_wrapper_name(service.name, method.name), owner)
                stream_types.extend(self._legacy_stream_types(service, method))

        logger.debug(
            "Client bindings for %s: %d methods, %d stream types, %d aliases",
            service.full_name,
            len(methods),
            len(stream_types),
            len(aliases),
        )
        return GeneratedClientBinding(
            interface_type=interface_type,
            holder_type=holder_type,
            interface=self._interface(service, interface_type),
            holder=self._holder(holder_type, interface_type, methods),
            constructor=self._constructor(service, constructor_name, holder_type, interface_type),
            methods=methods,
            stream_types=stream_types,
            aliases=aliases,
        )

    def _interface(self, service: Service, interface_type: str) -> Declaration:
        lines = comment_lines(service.comments.leading)
        if service.deprecated:
            lines.append(DEPRECATION_COMMENT)
        lines.append(f"class {interface_type}(abc.ABC):")
        lines.append(
            f'    """{interface_type} is the client API for {service.name} service."""'
        )
        for method in service.methods:
            body = [""]
            body.extend(comment_lines(method.comments.leading))
            if method.deprecated:
                body.append(DEPRECATION_COMMENT)
            body.append("@abc.abstractmethod")
            body.append(client_signature(method))
            body.append("    raise NotImplementedError()")
            lines.extend(indent_lines(body))
        return Declaration(name=interface_type, kind=DeclKind.TYPE, lines=lines)

    def _holder(
        self, holder_type: str, interface_type: str, methods: List[Declaration]
    ) -> Declaration:
        lines = [
            f"class {holder_type}({interface_type}):",
            "",
            "    def __init__(self, cc):",
            "        self.cc = cc",
        ]
        for method in methods:
            lines.append("")
            lines.extend(method.indented())
        return Declaration(name=holder_type, kind=DeclKind.TYPE, lines=lines)

    def _constructor(
        self, service: Service, name: str, holder_type: str, interface_type: str
    ) -> Declaration:
        lines = []
        if service.deprecated:
            lines.append(DEPRECATION_COMMENT)
        lines.extend(
            [
                f"def {name}(cc):",
                f'    """Return a {interface_type} bound to the transport connection ``cc``."""',
                f"    return {holder_type}(cc)",
            ]
        )
        return Declaration(name=name, kind=DeclKind.FUNCTION, lines=lines)

    def _call_prologue(self, method: Method) -> List[str]:
        lines = [DEPRECATION_COMMENT] if method.deprecated else []
        lines.append(client_signature(method))
        lines.append("    c_opts = [rest.static_method(), *opts]")
        return lines

    def _unary_call(self, service: Service, method: Method) -> Declaration:
        fm_symbol = naming.full_method_symbol(service.name, method.name)
        lines = self._call_prologue(method)
        lines.extend(
            [
                f"    out = {_type(method.output)}()",
                f"    self.cc.invoke(ctx, {fm_symbol}, in_, out, *c_opts)",
                "    return out",
            ]
        )
        return Declaration(name=method.name, kind=DeclKind.FUNCTION, lines=lines)

    def _streaming_call(self, service: Service, method: Method, index: int) -> Declaration:
        shape = method_shape(method)
        fm_symbol = naming.full_method_symbol(service.name, method.name)
        desc = f"{naming.route_table_name(service.name)}.streams[{index}]"
        if self.config.use_generic_streams:
            wrap = f"rest.GenericClientStream(stream, {_type(method.output)})"
        else:
            wrap = f"{naming.stream_wrapper_name(service.name, method.name)}(stream)"
        lines = self._call_prologue(method)
        lines.append(f"    stream = self.cc.new_stream(ctx, {desc}, {fm_symbol}, *c_opts)")
        lines.append(f"    x = {wrap}")
        if not shape.client_streams:
            lines.append("    x.client_stream.send_msg(in_)")
            lines.append("    x.client_stream.close_send()")
        lines.append("    return x")
        return Declaration(name=method.name, kind=DeclKind.FUNCTION, lines=lines)

    def _stream_alias(self, service: Service, method: Method) -> Declaration:
        name = naming.stream_interface_name(service.name, method.name)
        return Declaration(
            name=name,
            kind=DeclKind.VARIABLE,
            lines=[ALIAS_COMMENT, f"{name} = {client_stream_interface(method)}"],
        )

    def _legacy_stream_types(self, service: Service, method: Method) -> List[Declaration]:
        shape = method_shape(method)
        interface_name = naming.stream_interface_name(service.name, method.name)
        impl_name = naming.stream_wrapper_name(service.name, method.name)
        response = _type(method.output)

        interface = [f"class {interface_name}(rest.ClientStream):"]
        impl = [f"class {impl_name}(rest.EmbeddedClientStream, {interface_name}):"]
        if shape.has_send:
            interface.extend(
                [
                    "",
                    "    @abc.abstractmethod",
                    "    def Send(self, m):",
                    "        raise NotImplementedError()",
                ]
            )
            impl.extend(
                [
                    "",
                    "    def Send(self, m):",
                    "        self.client_stream.send_msg(m)",
                ]
            )
        if shape.has_recv:
            interface.extend(
                [
                    "",
                    "    @abc.abstractmethod",
                    "    def Recv(self):",
                    "        raise NotImplementedError()",
                ]
            )
            impl.extend(
                [
                    "",
                    "    def Recv(self):",
                    f"        m = {response}()",
                    "        self.client_stream.recv_msg(m)",
                    "        return m",
                ]
            )
        if shape.has_close_and_recv:
            interface.extend(
                [
                    "",
                    "    @abc.abstractmethod",
                    "    def CloseAndRecv(self):",
                    "        raise NotImplementedError()",
                ]
            )
            impl.extend(
                [
                    "",
                    "    def CloseAndRecv(self):",
                    "        self.client_stream.close_send()",
                    f"        m = {response}()",
                    "        self.client_stream.recv_msg(m)",
                    "        return m",
                ]
            )
        return [
            Declaration(name=interface_name, kind=DeclKind.TYPE, lines=interface),
            Declaration(name=impl_name, kind=DeclKind.TYPE, lines=impl),
        ]


__all__ = [
    "GeneratedClientBinding",
    "ClientBindingGenerator",
    "client_signature",
    "client_stream_interface",
]
