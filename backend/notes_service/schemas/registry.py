"""
Notes Service — Schema Registry
================================

What:  Named type descriptors that validate untyped input and serialize typed
       output, plus the registry holding the descriptors the contracts use.
How:   Each `Schema` wraps a pydantic `TypeAdapter`, so descriptors compose the
       same way Python types do: models (struct-of-fields), `List[...]`
       (array-of), `str`, `int`, and `NumericId` (integer-parsed-from-string).

    validate(value)   untyped → typed, or RequestValidationFailure
    serialize(value)  typed → JSON-compatible, or ResponseSerializationError
"""

from typing import Any, Dict, Generic, Iterator, List, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from notes_service.exceptions import RequestValidationFailure, ResponseSerializationError
from notes_service.schemas.note import (
    CreateNoteRequest,
    ErrorResponse,
    NotePathParams,
    NoteResponse,
)

T = TypeVar("T")


def format_validation_errors(exc: PydanticValidationError) -> str:
    """
    Flatten pydantic errors into one line per mismatched field.

    Example: "id: Value error, Input should be a numeric string"
    """
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


class Schema(Generic[T]):
    """
    A named, composable type descriptor.

    Attributes:
        name:   Registry key, also used in error messages
        type_:  The Python type this descriptor validates against
    """

    def __init__(self, name: str, type_: Any):
        self.name = name
        self.type_ = type_
        self._adapter: TypeAdapter = TypeAdapter(type_)

    def validate(self, value: Any) -> T:
        """Validate untyped input (parsed JSON, path params) into a typed value."""
        try:
            return self._adapter.validate_python(value)
        except PydanticValidationError as exc:
            raise RequestValidationFailure(
                message=f"Request does not match schema '{self.name}'",
                details=format_validation_errors(exc),
                context={"schema": self.name},
            ) from exc

    def serialize(self, value: Any) -> Any:
        """
        Validate a typed value against this descriptor and return its wire form.

        ORM rows are accepted where the model allows `from_attributes`.
        """
        try:
            typed = self._adapter.validate_python(value, from_attributes=True)
        except PydanticValidationError as exc:
            raise ResponseSerializationError(self.name, format_validation_errors(exc)) from exc
        return self._adapter.dump_python(typed, mode="json")

    def json_schema(self) -> Dict[str, Any]:
        """JSON Schema for this descriptor (used in the OpenAPI document)."""
        return self._adapter.json_schema()

    def __repr__(self) -> str:
        return f"Schema({self.name!r})"


class SchemaRegistry:
    """Name → Schema lookup. Names are unique."""

    def __init__(self) -> None:
        self._schemas: Dict[str, Schema] = {}

    def register(self, name: str, type_: Any) -> Schema:
        if name in self._schemas:
            raise ValueError(f"Schema '{name}' is already registered")
        schema: Schema = Schema(name, type_)
        self._schemas[name] = schema
        return schema

    def get(self, name: str) -> Schema:
        return self._schemas[name]

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __iter__(self) -> Iterator[Schema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)


# ── Note Schemas ──────────────────────────────────────────────────────────
note_schemas = SchemaRegistry()

CREATE_NOTE_BODY: Schema[CreateNoteRequest] = note_schemas.register("CreateNoteBody", CreateNoteRequest)
NOTE_PATH: Schema[NotePathParams] = note_schemas.register("NotePath", NotePathParams)
NOTE: Schema[NoteResponse] = note_schemas.register("Note", NoteResponse)
NOTE_LIST: Schema[List[NoteResponse]] = note_schemas.register("NoteList", List[NoteResponse])
CONFIRMATION: Schema[str] = note_schemas.register("Confirmation", str)
ERROR_BODY: Schema[ErrorResponse] = note_schemas.register("ErrorBody", ErrorResponse)
