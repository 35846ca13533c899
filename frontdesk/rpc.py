"""
Procedure registry for the RPC endpoint.

Each domain declares a ProcedureRouter (the RPC counterpart of an APIRouter)
and registers queries and mutations on it. Handlers receive a ProcedureContext
and, when an input model is declared, the validated input.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session

from .identity import ClerkClient

logger = logging.getLogger(__name__)

QUERY = "query"
MUTATION = "mutation"

# HTTP status -> RPC error classification
ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_SUPPORTED",
    409: "CONFLICT",
    422: "BAD_REQUEST",
    500: "INTERNAL_SERVER_ERROR",
}


def error_code_for_status(status_code: int) -> str:
    return ERROR_CODES.get(status_code, "INTERNAL_SERVER_ERROR" if status_code >= 500 else "BAD_REQUEST")


@dataclass
class ProcedureContext:
    db: Session
    identity: ClerkClient
    user_id: Optional[str] = None
    org_id: Optional[str] = None


@dataclass
class Procedure:
    path: str
    kind: str
    handler: Callable[..., Any]
    input_model: Optional[type] = None
    public: bool = False


class ProcedureRouter:
    def __init__(self, prefix: str):
        self.prefix = prefix
        self.procedures: dict[str, Procedure] = {}

    def query(self, name: str, input_model: Optional[type] = None, public: bool = False):
        return self._register(name, QUERY, input_model, public)

    def mutation(self, name: str, input_model: Optional[type] = None, public: bool = False):
        return self._register(name, MUTATION, input_model, public)

    def _register(self, name: str, kind: str, input_model: Optional[type], public: bool):
        def decorator(func):
            path = f"{self.prefix}.{name}"
            if path in self.procedures:
                raise ValueError(f"Procedure {path} registered twice")
            self.procedures[path] = Procedure(path, kind, func, input_model, public)
            return func

        return decorator


def build_registry(*routers: ProcedureRouter) -> dict[str, Procedure]:
    registry: dict[str, Procedure] = {}
    for router in routers:
        registry.update(router.procedures)
    logger.info(f"📋 Registered {len(registry)} RPC procedures")
    return registry
