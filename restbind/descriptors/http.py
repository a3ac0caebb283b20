"""Extraction of ``google.api.http`` route annotations from method options."""

from __future__ import annotations

import logging
from typing import List, Optional

from google.api import annotations_pb2, http_pb2
from google.protobuf import descriptor_pb2

from ..errors import HttpBindingError
from .model import HttpBinding, Verb

logger = logging.getLogger(__name__)

_PATTERN_VERBS = {
    "get": Verb.GET,
    "put": Verb.PUT,
    "post": Verb.POST,
    "delete": Verb.DELETE,
    "patch": Verb.PATCH,
}


def http_rule(options: descriptor_pb2.MethodOptions) -> Optional[http_pb2.HttpRule]:
    """Return the ``google.api.http`` rule of a method, if any."""
    # Re-parse so the extension resolves even when the options were decoded
    # before annotations_pb2 registered it.
    opts = descriptor_pb2.MethodOptions()
    opts.ParseFromString(options.SerializeToString())
    if not opts.HasExtension(annotations_pb2.http):
        return None
    return opts.Extensions[annotations_pb2.http]


def binding_from_rule(
    rule: http_pb2.HttpRule,
    *,
    path: Optional[str] = None,
    service: Optional[str] = None,
    method: Optional[str] = None,
) -> HttpBinding:
    pattern = rule.WhichOneof("pattern")
    if pattern is None:
        raise HttpBindingError(
            "HTTP rule does not select a verb", path=path, service=service, method=method
        )
    if pattern == "custom":
        kind = rule.custom.kind.upper()
        try:
            verb = Verb(kind)
        except ValueError:
            raise HttpBindingError(
                f"Unsupported custom HTTP verb '{rule.custom.kind}'",
                path=path,
                service=service,
                method=method,
            ) from None
        return HttpBinding(verb=verb, path=rule.custom.path)
    return HttpBinding(verb=_PATTERN_VERBS[pattern], path=getattr(rule, pattern))


def extract_bindings(
    options: descriptor_pb2.MethodOptions,
    *,
    path: Optional[str] = None,
    service: Optional[str] = None,
    method: Optional[str] = None,
) -> List[HttpBinding]:
    """All bindings of a method: the rule itself, then its additional bindings."""
    rule = http_rule(options)
    if rule is None:
        return []
    rules = [rule, *rule.additional_bindings]
    bindings = [
        binding_from_rule(item, path=path, service=service, method=method) for item in rules
    ]
    logger.debug(
        "%s.%s: %s",
        service,
        method,
        ", ".join(f"{b.verb} {b.path}" for b in bindings),
    )
    return bindings


__all__ = ["http_rule", "binding_from_rule", "extract_bindings"]
