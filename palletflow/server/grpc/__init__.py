"""gRPC gateway exposing the induct and stow operations."""

from __future__ import annotations

from .server import OperationsGrpcService, create_grpc_server, start_grpc_server

__all__ = ["OperationsGrpcService", "create_grpc_server", "start_grpc_server"]
