"""
Notes Service — Endpoint Contract Table
========================================

What:  The API surface declared as data: one immutable `EndpointContract` per
       operation, collected in a read-only `ContractTable`.
How:   The dispatcher interprets the table; it mounts one route per contract
       and uses each contract's schemas to validate input and serialize output.
When:  `NOTE_CONTRACTS` is built at import time and never modified.

Contract inventory:
    createNote   POST    /notes       body CreateNoteBody  → 201 NoteList
    getNotes     GET     /notes                            → 200 NoteList
    deleteNotes  DELETE  /notes                            → 200 Confirmation
    getNote      GET     /notes/{id}  path NotePath        → 200 Note
    deleteNote   DELETE  /notes/{id}  path NotePath        → 200 Confirmation
    every contract                                         → 500 ErrorBody
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterable, Iterator, Optional, Tuple

from notes_service.exceptions import OPERATION_ERROR_STATUS
from notes_service.schemas.registry import (
    CONFIRMATION,
    CREATE_NOTE_BODY,
    ERROR_BODY,
    NOTE,
    NOTE_LIST,
    NOTE_PATH,
    Schema,
)
from notes_service.services.note_service import note_service

Handler = Callable[..., Awaitable[Any]]

DEFAULT_ERROR_RESPONSES: Tuple[Tuple[int, Schema], ...] = ((OPERATION_ERROR_STATUS, ERROR_BODY),)


@dataclass(frozen=True)
class EndpointContract:
    """
    Declarative binding of an HTTP method + path template to an operation.

    Attributes:
        name:             Operation name; unique within a table, used as span name
        method:           HTTP method (upper case)
        path:             Path template, parameters in braces: /notes/{id}
        handler:          Async callable `(db, **inputs)`; receives `body` and/or
                          `path` when the matching schema is declared
        response:         Success response schema
        status_code:      Success status code
        request_body:     Schema for the JSON body, if the operation takes one
        request_path:     Schema for the path parameters, if the template has any
        error_responses:  Declared (status, schema) pairs for failures
        summary:          One-line description for the OpenAPI document
    """

    name: str
    method: str
    path: str
    handler: Handler
    response: Schema
    status_code: int = 200
    request_body: Optional[Schema] = None
    request_path: Optional[Schema] = None
    error_responses: Tuple[Tuple[int, Schema], ...] = DEFAULT_ERROR_RESPONSES
    summary: str = ""

    @property
    def error_schema(self) -> Schema:
        """Schema of the operation's 500 body."""
        for status, schema in self.error_responses:
            if status == OPERATION_ERROR_STATUS:
                return schema
        return ERROR_BODY


class ContractTable:
    """
    Ordered, read-only collection of endpoint contracts.

    Lookups:
        lookup(method, path_template) → contract or None
        get(name)                     → contract (KeyError if unknown)

    Raises ValueError at construction on a duplicate name or a duplicate
    (method, path) pair.
    """

    def __init__(self, contracts: Iterable[EndpointContract]):
        by_name: Dict[str, EndpointContract] = {}
        by_route: Dict[Tuple[str, str], EndpointContract] = {}
        ordered = []
        for contract in contracts:
            route = (contract.method.upper(), contract.path)
            if contract.name in by_name:
                raise ValueError(f"Duplicate contract name '{contract.name}'")
            if route in by_route:
                raise ValueError(
                    f"Contracts '{by_route[route].name}' and '{contract.name}' "
                    f"both bind {route[0]} {route[1]}"
                )
            by_name[contract.name] = contract
            by_route[route] = contract
            ordered.append(contract)

        self._contracts: Tuple[EndpointContract, ...] = tuple(ordered)
        self._by_name = MappingProxyType(by_name)
        self._by_route = MappingProxyType(by_route)

    def lookup(self, method: str, path: str) -> Optional[EndpointContract]:
        return self._by_route.get((method.upper(), path))

    def get(self, name: str) -> EndpointContract:
        return self._by_name[name]

    def __iter__(self) -> Iterator[EndpointContract]:
        return iter(self._contracts)

    def __len__(self) -> int:
        return len(self._contracts)


NOTE_CONTRACTS = ContractTable(
    [
        EndpointContract(
            name="createNote",
            method="POST",
            path="/notes",
            handler=note_service.create_note,
            request_body=CREATE_NOTE_BODY,
            response=NOTE_LIST,
            status_code=201,
            summary="Create a note and return all notes",
        ),
        EndpointContract(
            name="getNotes",
            method="GET",
            path="/notes",
            handler=note_service.get_notes,
            response=NOTE_LIST,
            summary="List all notes",
        ),
        EndpointContract(
            name="deleteNotes",
            method="DELETE",
            path="/notes",
            handler=note_service.delete_notes,
            response=CONFIRMATION,
            summary="Delete all notes",
        ),
        EndpointContract(
            name="getNote",
            method="GET",
            path="/notes/{id}",
            handler=note_service.get_note,
            request_path=NOTE_PATH,
            response=NOTE,
            summary="Get a single note by id",
        ),
        EndpointContract(
            name="deleteNote",
            method="DELETE",
            path="/notes/{id}",
            handler=note_service.delete_note,
            request_path=NOTE_PATH,
            response=CONFIRMATION,
            summary="Delete a single note by id",
        ),
    ]
)
