"""
Index identity: (database, collection, index_name) and its import-id form.

The three parts are joined with "." without escaping, so a component that
itself contains a dot does not survive a round trip.
"""

from dataclasses import dataclass

from index_provider.config import IDENTITY_SEGMENTS, IDENTITY_SEPARATOR
from index_provider.core.errors import MalformedIdentity


@dataclass(frozen=True)
class IndexIdentity:
    database: str
    collection: str
    index_name: str

    def __str__(self) -> str:
        return encode_identity(self)


def encode_identity(identity: IndexIdentity) -> str:
    return IDENTITY_SEPARATOR.join(
        [identity.database, identity.collection, identity.index_name]
    )


def decode_identity(token: str) -> IndexIdentity:
    """
    Parse "<database>.<collection>.<index_name>".

    Raises:
        MalformedIdentity: not exactly three non-empty segments
    """
    parts = token.split(IDENTITY_SEPARATOR)
    if len(parts) != IDENTITY_SEGMENTS or not all(parts):
        raise MalformedIdentity(
            f"Invalid id format '{token}'. Should be <database>.<collection>.<index_name>",
            operation="import",
        )

    database, collection, index_name = parts
    return IndexIdentity(database=database, collection=collection, index_name=index_name)
