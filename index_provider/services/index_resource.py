"""
MongoDB index resource handlers.

Each handler takes the plain plan/state dictionaries the host hands over,
drives IndexReconciler, and answers with a ResourceResponse: the new state
plus diagnostics. Errors never escape as exceptions; they become error
diagnostics and the prior state is returned untouched.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

from pydantic import ValidationError
from pymongo import MongoClient

from index_provider.config import PLACEHOLDER_ID, RESOURCE_TYPE_NAME
from index_provider.core.errors import IndexNotFound, IndexResourceError, MalformedIdentity
from index_provider.core.identity_codec import IndexIdentity
from index_provider.db.mongo import resolve_operation_timeout
from index_provider.db.schemas.index_spec import IndexSpec, construct_spec
from index_provider.services.index_reconciler import IndexReconciler, unexpected_update

logger = logging.getLogger(__name__)

State = Dict[str, Any]

REPORT_HINT = "If the error is not clear, please contact the provider developers.\n\n"


@dataclass
class Diagnostic:
    severity: str  # "error" | "warning"
    summary: str
    detail: str = ""


@dataclass
class ResourceResponse:
    state: Optional[State] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def add_error(self, summary: str, detail: str = "") -> None:
        self.diagnostics.append(Diagnostic(severity="error", summary=summary, detail=detail))

    def has_error(self) -> bool:
        return any(d.severity == "error" for d in self.diagnostics)


def to_state(spec: IndexSpec) -> State:
    state = spec.model_dump(mode="json")
    state["id"] = PLACEHOLDER_ID
    return state


class IndexResource:
    """Create indexes in MongoDB."""

    def __init__(self, reconciler: Optional[IndexReconciler] = None):
        self.reconciler = reconciler

    @staticmethod
    def type_name() -> str:
        return RESOURCE_TYPE_NAME

    def configure(self, provider_data: Any) -> ResourceResponse:
        """Attach the provider's client. None means the provider is not configured yet."""
        logger.info("Configuring MongoDB index resource")
        response = ResourceResponse()
        if provider_data is None:
            return response

        if not isinstance(provider_data, MongoClient):
            response.add_error(
                "Unexpected Resource Configure Type",
                f"Expected MongoClient, got: {type(provider_data).__name__}. "
                "Please report this issue to the provider developers.",
            )
            return response

        try:
            default_timeout = resolve_operation_timeout()
        except IndexResourceError as e:
            response.add_error("Invalid operation timeout", str(e))
            return response

        self.reconciler = IndexReconciler(provider_data, default_timeout=default_timeout)
        logger.info("Configured MongoDB index resource")
        return response

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, plan: State) -> ResourceResponse:
        response = ResourceResponse()
        spec = self._parse(plan, response)
        if spec is None or not self._ready(response):
            return response

        try:
            created = self.reconciler.create(spec)
        except IndexResourceError as e:
            response.add_error(
                "Unable to create index",
                "An unexpected error occurred when creating index. " + REPORT_HINT + f"Error: {e}",
            )
            return response

        response.state = to_state(created)
        return response

    def read(self, state: State) -> ResourceResponse:
        """Refresh state from the server. An import skeleton (no keys yet) is filled in."""
        response = ResourceResponse(state=state)
        if not self._ready(response):
            return response

        identity = self._identity(state, response)
        if identity is None:
            return response

        # State was written by this provider: trusted, not re-validated
        known = construct_spec(state) if state.get("keys") else None

        try:
            refreshed = self.reconciler.read(identity, known=known)
        except IndexResourceError as e:
            response.add_error(self._read_summary(e, identity), f"Error: {e}")
            return response

        response.state = to_state(refreshed)
        return response

    def update(self, plan: State, state: State) -> ResourceResponse:
        """Always an error, whatever the plan holds: every attribute forces replacement."""
        response = ResourceResponse(state=state)
        identity = None
        if all(state.get(attr) for attr in ("database", "collection", "name")):
            identity = IndexIdentity(
                database=state["database"],
                collection=state["collection"],
                index_name=state["name"],
            )

        error = unexpected_update(identity)
        response.add_error("An update has been triggered when none should have been.", f"Error: {error}")
        return response

    def delete(self, state: State) -> ResourceResponse:
        response = ResourceResponse(state=state)
        if not self._ready(response):
            return response

        identity = self._identity(state, response)
        if identity is None:
            return response

        try:
            self.reconciler.delete(identity)
        except IndexResourceError as e:
            response.add_error(
                "Unable to drop index",
                "An unexpected error occurred when dropping index. " + REPORT_HINT + f"Error: {e}",
            )
            return response

        response.state = None
        return response

    def import_state(self, import_id: str) -> ResourceResponse:
        """Seed database/collection/name from an import id; read() fills in the rest."""
        response = ResourceResponse()
        if not self._ready(response):
            return response

        try:
            identity = self.reconciler.import_identity(import_id)
        except MalformedIdentity as e:
            response.add_error(
                "Invalid id format. Should be <database>.<collection>.<index_name>.",
                f"Error: {e}",
            )
            return response

        response.state = {
            "database": identity.database,
            "collection": identity.collection,
            "name": identity.index_name,
        }
        return response

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ready(self, response: ResourceResponse) -> bool:
        if self.reconciler is None:
            response.add_error(
                "Unconfigured MongoDB client",
                "The index resource was used before the provider configured a MongoDB client.",
            )
            return False
        return True

    @staticmethod
    def _parse(data: State, response: ResourceResponse) -> Optional[IndexSpec]:
        try:
            return IndexSpec.model_validate(data)
        except ValidationError as e:
            response.add_error("Invalid index configuration", str(e))
            return None

    @staticmethod
    def _identity(state: State, response: ResourceResponse) -> Optional[IndexIdentity]:
        missing = [attr for attr in ("database", "collection", "name") if not state.get(attr)]
        if missing:
            response.add_error(
                "Incomplete index state",
                f"Missing attribute(s): {', '.join(missing)}",
            )
            return None
        return IndexIdentity(
            database=state["database"],
            collection=state["collection"],
            index_name=state["name"],
        )

    @staticmethod
    def _read_summary(error: IndexResourceError, identity: IndexIdentity) -> str:
        if isinstance(error, IndexNotFound):
            return f"Unable to find index with name {identity.index_name}"
        return "Unable to read index"
