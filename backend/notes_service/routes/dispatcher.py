"""
Notes Service — Contract Dispatcher
====================================

What:  Generic interpreter over the contract table. Mounts one route per
       contract and runs the request pipeline for it.
How:   Starlette matches (method, path template) and extracts path
       parameters; unmatched requests never reach this module (404/405 are
       formatted by the global handlers in main.py).

Pipeline per request:
    Received → Matched → Validated → Executing → Responding | Failed

    1. Validate path parameters and JSON body against the contract's schemas
       → RequestValidationFailure (400) before any session is opened
    2. Borrow a session from the store handle
    3. Run the handler inside its span (`traced`)
    4. Success: serialize the result through the contract's response schema
       and answer with the contract's status code
       Failure: answer with the mapped ErrorBody and status 500
"""

import logging
from typing import Any, Dict, Mapping

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from opentelemetry import trace
from starlette.responses import Response

from notes_service.database import Database
from notes_service.exceptions import OperationError, RequestValidationFailure
from notes_service.middleware.request_id import request_id_var
from notes_service.routes.contracts import ContractTable, EndpointContract, Handler
from notes_service.tracing import traced

logger = logging.getLogger(__name__)


def span_attributes_for(contract: EndpointContract):
    """Build the attribute function for a contract's span."""

    def attributes(inputs: Mapping[str, Any]) -> Dict[str, Any]:
        attrs: Dict[str, Any] = {
            "http.method": contract.method,
            "http.route": contract.path,
        }
        rid = request_id_var.get("")
        if rid:
            attrs["request.id"] = rid
        path = inputs.get("path")
        if path is not None:
            for key, value in path.model_dump().items():
                attrs[f"note.{key}"] = value
        return attrs

    return attributes


class ContractDispatcher:
    """
    Routes requests to operation handlers according to a `ContractTable`.

    Attributes:
        table:     The contracts to serve (read-only)
        database:  Store handle; one session is borrowed per executed request
        tracer:    Tracer used for the per-operation spans
    """

    def __init__(self, table: ContractTable, database: Database, tracer: trace.Tracer):
        self.table = table
        self.database = database
        self.tracer = tracer
        self._handlers: Dict[str, Handler] = {
            contract.name: traced(tracer, contract.name, span_attributes_for(contract))(
                contract.handler
            )
            for contract in table
        }

    def build_router(self) -> APIRouter:
        """Create an APIRouter with one route per contract."""
        router = APIRouter(tags=["Notes"])
        for contract in self.table:
            router.add_api_route(
                contract.path,
                self._endpoint_for(contract),
                methods=[contract.method],
                status_code=contract.status_code,
                response_model=contract.response.type_,
                responses={
                    status: {"model": schema.type_, "description": "Operation failed"}
                    for status, schema in contract.error_responses
                },
                name=contract.name,
                operation_id=contract.name,
                summary=contract.summary or None,
                openapi_extra=self._openapi_extra(contract),
            )
        return router

    def _endpoint_for(self, contract: EndpointContract):
        async def endpoint(request: Request) -> Response:
            return await self.dispatch(contract, request)

        endpoint.__name__ = contract.name
        return endpoint

    async def dispatch(self, contract: EndpointContract, request: Request) -> Response:
        """Run the validate → execute → respond pipeline for one request."""
        try:
            inputs = await self._read_inputs(contract, request)
        except RequestValidationFailure as exc:
            logger.warning(
                "[%s] %s rejected: %s (%s)",
                request_id_var.get(""),
                contract.name,
                exc.message,
                exc.details,
            )
            raise

        handler = self._handlers[contract.name]
        try:
            async with self.database.session() as db:
                result = await handler(db, **inputs)
        except OperationError as exc:
            logger.error(
                "[%s] %s failed: %s | %s",
                request_id_var.get(""),
                contract.name,
                exc.body.message,
                exc.body.details,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=contract.error_schema.serialize(exc.body),
            )

        return JSONResponse(
            status_code=contract.status_code,
            content=contract.response.serialize(result),
        )

    async def _read_inputs(self, contract: EndpointContract, request: Request) -> Dict[str, Any]:
        """Validate path parameters and body; returns the handler's keyword inputs."""
        inputs: Dict[str, Any] = {}
        if contract.request_path is not None:
            inputs["path"] = contract.request_path.validate(dict(request.path_params))
        if contract.request_body is not None:
            try:
                payload = await request.json()
            except ValueError as exc:
                raise RequestValidationFailure(
                    message="Request body is not valid JSON",
                    details=str(exc) or type(exc).__name__,
                ) from exc
            inputs["body"] = contract.request_body.validate(payload)
        return inputs

    @staticmethod
    def _openapi_extra(contract: EndpointContract) -> Dict[str, Any]:
        """Publish the request schemas, since endpoints read the raw request."""
        extra: Dict[str, Any] = {}
        if contract.request_body is not None:
            extra["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": contract.request_body.json_schema()}},
            }
        if contract.request_path is not None:
            properties = contract.request_path.json_schema().get("properties", {})
            extra["parameters"] = [
                {"name": name, "in": "path", "required": True, "schema": schema}
                for name, schema in properties.items()
            ]
        return extra
