# src/cluster_tasks/admin/models.py

"""Admin request/response envelope (GraphQL over HTTP)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..errors import DecodeError, RequestError


@dataclass(frozen=True, slots=True)
class AdminRequest:
    query: str
    variables: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> bytes:
        try:
            return json.dumps({"query": self.query, "variables": self.variables}).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RequestError(f"error while marshalling params: {e}") from e


@dataclass(frozen=True, slots=True)
class GraphQLError:
    message: str
    path: list[Any] | None = None
    locations: list[dict[str, int]] | None = None
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_obj(cls, obj: Any) -> "GraphQLError":
        if not isinstance(obj, Mapping):
            return cls(message=str(obj))
        path = obj.get("path")
        locations = obj.get("locations")
        extensions = obj.get("extensions")
        return cls(
            message=str(obj.get("message", "")),
            path=list(path) if isinstance(path, list) else None,
            locations=list(locations) if isinstance(locations, list) else None,
            extensions=dict(extensions) if isinstance(extensions, Mapping) else None,
        )

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} (path: {'.'.join(str(p) for p in self.path)})"
        return self.message


@dataclass(frozen=True, slots=True)
class AdminResponse:
    data: dict[str, Any] | None
    errors: list[GraphQLError] = field(default_factory=list)
    extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def from_json(cls, body: bytes | str) -> "AdminResponse":
        try:
            raw = json.loads(body)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"error unmarshalling GQL response: {e}") from e

        if not isinstance(raw, dict):
            raise DecodeError(f"error unmarshalling GQL response: expected object, got {type(raw).__name__}")

        data = raw.get("data")
        if data is not None and not isinstance(data, dict):
            raise DecodeError("error unmarshalling GQL response: 'data' is not an object")

        errors_raw = raw.get("errors") or []
        if not isinstance(errors_raw, list):
            errors_raw = [errors_raw]

        extensions = raw.get("extensions")
        return cls(
            data=data,
            errors=[GraphQLError.from_obj(e) for e in errors_raw],
            extensions=dict(extensions) if isinstance(extensions, dict) else {},
        )


def dig(data: Mapping[str, Any] | None, *path: str) -> Any:
    """Walk nested mappings; raise DecodeError naming the first missing key."""
    cur: Any = data
    walked: list[str] = []
    for key in path:
        walked.append(key)
        if not isinstance(cur, Mapping) or key not in cur:
            raise DecodeError(f"missing field in admin response: {'.'.join(walked)}")
        cur = cur[key]
    return cur
