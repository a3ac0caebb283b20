"""Descriptor model and the adapter that builds it from protobuf records."""

from .adapter import DescriptorAdapter, TypeIndex, compiler_version_string
from .http import extract_bindings
from .model import Comments, HttpBinding, Method, ProtoFile, Service, TypeRef, Verb

__all__ = [
    "DescriptorAdapter",
    "TypeIndex",
    "compiler_version_string",
    "extract_bindings",
    "Comments",
    "HttpBinding",
    "Method",
    "ProtoFile",
    "Service",
    "TypeRef",
    "Verb",
]
