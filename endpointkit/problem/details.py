"""RFC 9457 problem details error value."""

from __future__ import annotations

from collections.abc import Mapping
import json
from typing import Any

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError
from pydantic_core import to_jsonable_python

from endpointkit.schemas.problem import ProblemDocument

PROTECTED_MEMBERS = frozenset({"type", "title", "detail", "status", "code", "instance"})


class ProblemMarshalError(ValueError):
    """Raised when a DetailedError cannot be represented as JSON."""


class ProblemUnmarshalError(ValueError):
    """Raised when a JSON document cannot be decoded into a DetailedError."""


class DetailedError(Exception):
    """Structured error returned to clients as problem details.

    Instances are treated as immutable: ``with_detail`` and ``with_extension``
    return new errors and leave the receiver untouched. Extension members are
    serialized at the same level as the core members, and a core member always
    wins over an extension member with the same name.
    """

    def __init__(
        self,
        *,
        type: str = "",
        title: str = "",
        detail: str = "",
        status: int = 0,
        code: str = "",
        instance: str = "",
        extension_members: Mapping[str, Any] | None = None,
    ) -> None:
        self.type = type
        self.title = title
        self.detail = detail
        self.status = status
        self.code = code
        self.instance = instance
        self.extension_members = dict(extension_members) if extension_members else {}
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.status} {self.title}: {self.detail}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status!r}, code={self.code!r}, "
            f"title={self.title!r}, instance={self.instance!r})"
        )

    def _fields(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "detail": self.detail,
            "status": self.status,
            "code": self.code,
            "instance": self.instance,
            "extension_members": self.extension_members,
        }

    def __reduce__(self) -> tuple[Any, ...]:
        return _restore, (type(self), self._fields())

    def _clone(self, **changes: Any) -> DetailedError:
        fields = self._fields()
        fields.update(changes)
        return type(self)(**fields)

    def with_detail(self, detail: str) -> DetailedError:
        """Return a copy with the detail replaced."""
        return self._clone(detail=detail)

    def with_extension(self, key: str, value: Any) -> DetailedError:
        """Return a copy with the extension member *key* added or replaced."""
        members = dict(self.extension_members)
        members[key] = value
        return self._clone(extension_members=members)

    def to_dict(self) -> dict[str, Any]:
        """Return the flat problem document with core members applied last."""
        document = dict(self.extension_members)
        document["type"] = self.type
        document["title"] = self.title
        document["detail"] = self.detail
        document["status"] = self.status
        document["code"] = self.code
        document["instance"] = self.instance
        return document

    def marshal_json(self) -> bytes:
        """Encode the problem document as compact JSON with sorted keys."""
        try:
            document = to_jsonable_python(self.to_dict())
            encoded = json.dumps(document, sort_keys=True, separators=(",", ":"), allow_nan=False)
        except (PydanticSerializationError, TypeError, ValueError) as exc:
            raise ProblemMarshalError(f"marshaling DetailedError as JSON: {exc}") from exc
        return encoded.encode("utf-8")

    def must_marshal_json(self) -> bytes:
        """Encode the problem document, treating failure as a programming error."""
        try:
            return self.marshal_json()
        except ProblemMarshalError as exc:
            raise RuntimeError(str(exc)) from exc

    def must_marshal_json_string(self) -> str:
        """Return ``must_marshal_json`` decoded as text."""
        return self.must_marshal_json().decode("utf-8")

    @classmethod
    def from_json(cls, data: str | bytes) -> DetailedError:
        """Decode a problem document, collecting unknown members as extensions."""
        try:
            raw = json.loads(data)
        except ValueError as exc:
            raise ProblemUnmarshalError(f"unmarshaling DetailedError from JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise ProblemUnmarshalError(
                f"unmarshaling DetailedError from JSON: expected an object, got {type(raw).__name__}"
            )

        try:
            core = ProblemDocument.model_validate(raw)
        except ValidationError as exc:
            raise ProblemUnmarshalError(f"unmarshaling DetailedError from JSON: {exc}") from exc

        extensions = {key: value for key, value in raw.items() if key not in PROTECTED_MEMBERS}
        return cls(**core.model_dump(), extension_members=extensions)


def _restore(cls: type[DetailedError], fields: dict[str, Any]) -> DetailedError:
    return cls(**fields)
