"""Async gRPC server that mirrors the REST batch operations."""

from __future__ import annotations

from typing import Any, AsyncContextManager, Callable

import grpc
from google.protobuf import json_format, struct_pb2
from pydantic import ValidationError

from palletflow.enterprise.core import LifecycleRules
from palletflow.persistence import RecordStore, StorageError
from palletflow.server.api.schemas.operations import (
    InductPayloadSchema,
    InductRequestSchema,
    StowPayloadSchema,
    StowRequestSchema,
)
from palletflow.server.api.schemas.records import PackageSchema
from palletflow.server.dependencies import get_lifecycle_rules, get_repository_context
from palletflow.services import InductionEngine, StowEngine

SERVICE_NAME = "palletflow.Operations"

StoreFactory = Callable[[], AsyncContextManager[RecordStore]]


def _to_struct(payload: dict[str, Any]) -> struct_pb2.Struct:
    struct = struct_pb2.Struct()
    struct.update(payload)
    return struct


class OperationsGrpcService:
    def __init__(
        self,
        store_factory: StoreFactory = get_repository_context,
        rules: LifecycleRules | None = None,
    ) -> None:
        self.store_factory = store_factory
        self.rules = rules or get_lifecycle_rules()

    async def Induct(self, request: struct_pb2.Struct, context: grpc.aio.ServicerContext) -> struct_pb2.Struct:  # noqa: N802
        try:
            payload = InductRequestSchema.model_validate(json_format.MessageToDict(request))
        except ValidationError as exc:
            await context.abort(grpc.StatusCode.INVALID_ARGUMENT, str(exc))
        async with self.store_factory() as store:
            outcomes = await InductionEngine(store, self.rules).induct(
                payload.package_ids, payload.client_id, payload.warehouse_id
            )
        return _to_struct(InductPayloadSchema.from_outcomes(outcomes).model_dump(mode="json"))

    async def Stow(self, request: struct_pb2.Struct, context: grpc.aio.ServicerContext) -> struct_pb2.Struct:  # noqa: N802
        try:
            payload = StowRequestSchema.model_validate(json_format.MessageToDict(request))
        except ValidationError as exc:
            await context.abort(grpc.StatusCode.INVALID_ARGUMENT, str(exc))
        async with self.store_factory() as store:
            outcomes = await StowEngine(store, self.rules).stow(
                payload.package_ids, payload.warehouse_id, payload.pallet_id
            )
        return _to_struct(StowPayloadSchema.from_outcomes(outcomes).model_dump(mode="json"))

    async def GetPackage(self, request: struct_pb2.Struct, context: grpc.aio.ServicerContext) -> struct_pb2.Struct:  # noqa: N802
        package_id = json_format.MessageToDict(request).get("id")
        if not package_id:
            await context.abort(grpc.StatusCode.INVALID_ARGUMENT, "id is required")
        try:
            async with self.store_factory() as store:
                package = await store.get_package(package_id)
        except StorageError:
            await context.abort(grpc.StatusCode.UNAVAILABLE, "Record store unavailable")
        if package is None:
            await context.abort(grpc.StatusCode.NOT_FOUND, "Package not found")
        return _to_struct(PackageSchema.from_domain(package).model_dump(mode="json"))


class _OperationsHandler(grpc.GenericRpcHandler):
    def __init__(self, servicer: OperationsGrpcService) -> None:
        self.servicer = servicer
        self._method_handlers = {
            name: grpc.unary_unary_rpc_method_handler(
                getattr(servicer, name),
                request_deserializer=struct_pb2.Struct.FromString,
                response_serializer=struct_pb2.Struct.SerializeToString,
            )
            for name in ("Induct", "Stow", "GetPackage")
        }

    def service(self, handler_call_details: grpc.HandlerCallDetails):
        service, _, method = handler_call_details.method.lstrip("/").partition("/")
        if service != SERVICE_NAME:
            return None
        return self._method_handlers.get(method)


def create_grpc_server(
    port: int = 50051,
    host: str = "[::]",
    servicer: OperationsGrpcService | None = None,
) -> grpc.aio.Server:
    server = grpc.aio.server()
    server.add_generic_rpc_handlers((_OperationsHandler(servicer or OperationsGrpcService()),))
    server.add_insecure_port(f"{host}:{port}")
    return server


async def start_grpc_server(
    port: int = 50051,
    host: str = "[::]",
    servicer: OperationsGrpcService | None = None,
) -> grpc.aio.Server:
    server = create_grpc_server(port, host, servicer)
    await server.start()
    return server
