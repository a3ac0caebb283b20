"""Unified error model for restbind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorLocation:
    path: Optional[str] = None
    service: Optional[str] = None
    method: Optional[str] = None

    def describe(self) -> str:
        parts = [part for part in (self.path, self.service, self.method) if part]
        if not parts:
            return "unknown location"
        if self.path and len(parts) > 1:
            return f"{self.path}:{'.'.join(parts[1:])}"
        return ".".join(parts)


class RestBindError(Exception):
    """Base class for all generation-time errors surfaced to users."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        service: Optional[str] = None,
        method: Optional[str] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(path=path, service=service, method=method)
        self.path = path
        self.service = service
        self.method = method
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        components = [self.message]
        meta_parts = []
        location_desc = self.location.describe()
        if location_desc != "unknown location":
            meta_parts.append(location_desc)
        if self.code:
            meta_parts.append(self.code)
        if meta_parts:
            components[-1] = f"{components[-1]} ({'; '.join(meta_parts)})"
        if self.hint:
            components.append(f"Hint: {self.hint}")
        return " ".join(part for part in components if part)


class DescriptorError(RestBindError):
    """Raised when a descriptor cannot be adapted (e.g. an unknown type)."""

    code = "RB001"


class HttpBindingError(RestBindError):
    """Raised when an HTTP annotation selects no supported verb."""

    code = "RB002"
    hint = "Use one of get, put, post, delete, patch, or custom with kind HEAD."


class NameCollisionError(RestBindError):
    """Raised when two generated identifiers collide within one module."""

    code = "RB003"


class ConfigError(RestBindError):
    """Raised when generator options are invalid."""

    code = "RB004"


__all__ = [
    "RestBindError",
    "DescriptorError",
    "HttpBindingError",
    "NameCollisionError",
    "ConfigError",
    "ErrorLocation",
]
