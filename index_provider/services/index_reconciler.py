"""
Index Reconciler — lifecycle of ONE MongoDB index
=================================================

States: ABSENT -> PRESENT. There is no UPDATING state.

Hard Rules:
1. Every declared field is immutable. Any change is handled by the caller as
   delete + create; update() itself always fails with UnexpectedUpdate.
2. One attempt per store call, no retries. Failures are raised with the
   operation, the identity and the pymongo error attached.
3. On any failure the previously known spec stays authoritative: nothing is
   returned half-refreshed.
4. Every store call runs under pymongo.timeout(); hitting the deadline raises
   OperationCancelled.

The client is injected and only ever read from: the reconciler never closes
or reconfigures it, and keeps no state between calls.
"""

from typing import Any, Dict, Optional, Type
import logging

import pymongo
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from index_provider.core.errors import (
    IndexCreationFailed,
    IndexDeletionFailed,
    IndexDescriptionInvalid,
    IndexListingFailed,
    IndexNotFound,
    IndexResourceError,
    OperationCancelled,
    UnexpectedUpdate,
)
from index_provider.core.identity_codec import IndexIdentity, decode_identity
from index_provider.core.index_translator import build_create_request, reconstruct_spec
from index_provider.db.schemas.index_spec import IndexSpec, construct_spec


def identity_of(spec: IndexSpec) -> IndexIdentity:
    return IndexIdentity(database=spec.database, collection=spec.collection, index_name=spec.name)


def unexpected_update(identity: Optional[IndexIdentity] = None) -> UnexpectedUpdate:
    """Error for any update request; the index is never changed in place."""
    logging.getLogger(__name__).error(f"Update requested for immutable index {identity}")
    target = f" on index {identity}" if identity is not None else ""
    return UnexpectedUpdate(
        f"An update has been triggered{target} when none should have been. "
        "Changes in index should always result in resource recreation.",
        operation="update",
        identity=str(identity) if identity is not None else None,
    )


class IndexReconciler:
    """
    Create / read / delete a single index against an injected MongoClient.

    Translation and identity parsing are delegated to the pure helpers in
    index_provider.core; this class only sequences store calls.
    """

    def __init__(self, client: MongoClient, default_timeout: Optional[float] = None):
        self.client = client
        self.default_timeout = default_timeout
        self.logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self, spec: IndexSpec, timeout: Optional[float] = None) -> IndexSpec:
        """
        Create the declared index.

        The server may assign or normalize the index name, so the returned
        spec carries the name it reports rather than the requested one.

        Raises:
            IndexCreationFailed: the server rejected the index
            OperationCancelled: the deadline expired
        """
        identity = identity_of(spec)
        self.logger.debug(f"Creating index {identity}")

        model = build_create_request(spec)
        collection = self._collection(identity)
        try:
            with pymongo.timeout(self._deadline(timeout)):
                names = collection.create_indexes([model])
        except PyMongoError as e:
            raise self._store_failure(
                IndexCreationFailed, "Unable to create index", "create", identity, e
            ) from e

        created = spec.model_copy(update={"name": names[0]})
        self.logger.debug(f"Index {identity_of(created)} created")
        return created

    def read(
        self,
        identity: IndexIdentity,
        known: Optional[IndexSpec] = None,
        timeout: Optional[float] = None
    ) -> IndexSpec:
        """
        Refresh an index from the server.

        Args:
            identity: index to look up
            known: last known spec; supplies the fields the server description
                cannot give back (collation, wildcard_projection, background)
            timeout: deadline in seconds, defaults to the reconciler's

        Raises:
            IndexListingFailed: list_indexes failed
            IndexNotFound: no index with that name on the collection
            IndexDescriptionInvalid: a key value has no declared counterpart
            OperationCancelled: the deadline expired
        """
        self.logger.debug(f"Getting index {identity}")

        collection = self._collection(identity)
        try:
            with pymongo.timeout(self._deadline(timeout)):
                indexes = list(collection.list_indexes())
        except PyMongoError as e:
            raise self._store_failure(
                IndexListingFailed, "Unable to list indexes", "read", identity, e
            ) from e

        found = next((index for index in indexes if index.get("name") == identity.index_name), None)
        if found is None:
            raise IndexNotFound(
                f"Unable to find index with name {identity.index_name}",
                operation="read",
                identity=str(identity),
            )

        self.logger.debug(f"Found index {identity}")

        try:
            fields = reconstruct_spec(found)
        except IndexDescriptionInvalid as e:
            e.identity = str(identity)
            raise

        # What the server reports is recorded as-is, never re-validated
        refreshed: Dict[str, Any] = dict(known) if known is not None else {}
        refreshed.update(fields)
        refreshed["database"] = identity.database
        refreshed["collection"] = identity.collection
        spec = construct_spec(refreshed)

        self.logger.debug(f"Refreshed index {identity}")
        return spec

    def requires_replacement(self, old: IndexSpec, new: IndexSpec) -> bool:
        """Every field is immutable: any planned change means delete + create."""
        return True

    def update(self, old: IndexSpec, new: IndexSpec) -> IndexSpec:
        """Never applied. Reaching this is a misuse of the replace-only lifecycle."""
        raise unexpected_update(identity_of(old))

    def delete(self, identity: IndexIdentity, timeout: Optional[float] = None) -> None:
        """
        Drop the index by name.

        Dropping an index that no longer exists is not special-cased: the
        server's error is raised like any other.

        Raises:
            IndexDeletionFailed: the server refused the drop
            OperationCancelled: the deadline expired
        """
        self.logger.debug(f"Dropping index {identity}")

        collection = self._collection(identity)
        try:
            with pymongo.timeout(self._deadline(timeout)):
                collection.drop_index(identity.index_name)
        except PyMongoError as e:
            raise self._store_failure(
                IndexDeletionFailed, "Unable to drop index", "delete", identity, e
            ) from e

        self.logger.debug(f"Dropped index {identity}")

    def import_identity(self, token: str) -> IndexIdentity:
        """
        Parse an import id. Does not fetch anything: follow up with read().

        Raises:
            MalformedIdentity: not <database>.<collection>.<index_name>
        """
        return decode_identity(token)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _collection(self, identity: IndexIdentity) -> Collection:
        return self.client[identity.database][identity.collection]

    def _deadline(self, timeout: Optional[float]) -> Optional[float]:
        return timeout if timeout is not None else self.default_timeout

    def _store_failure(
        self,
        error_cls: Type[IndexResourceError],
        message: str,
        operation: str,
        identity: IndexIdentity,
        cause: PyMongoError
    ) -> IndexResourceError:
        if cause.timeout:
            self.logger.error(f"{operation} of index {identity} cancelled: {cause}")
            return OperationCancelled(
                f"Operation '{operation}' on index {identity} was cancelled",
                operation=operation,
                identity=str(identity),
                cause=cause,
            )

        self.logger.error(f"{message} {identity}: {cause}")
        return error_cls(message, operation=operation, identity=str(identity), cause=cause)
