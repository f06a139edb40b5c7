"""
Index Translator
================

Declared IndexSpec  ->  pymongo IndexModel           (create)
list_indexes() doc  ->  declared IndexSpec fields    (read / refresh)

The translation is intentionally asymmetric. collation, wildcard_projection
and background are sent on create but never rebuilt from the server's
description: a refresh keeps whatever the caller last knew for them.
Guessing them from the description would fabricate drift.
"""

from typing import Any, Dict, Mapping

from pymongo import IndexModel

from index_provider.core.errors import (
    IndexDescriptionInvalid,
    InvalidDirectionValue,
    UnsupportedDirectionType,
)
from index_provider.core.type_mapper import (
    to_declared_direction,
    to_native_collation,
    to_native_direction,
)
from index_provider.db.schemas.index_spec import IndexSpec


def build_create_request(spec: IndexSpec) -> IndexModel:
    """
    Build the native create-index request for a declared spec.

    Optional settings are only passed when declared, so an absent option
    never reaches the server as an empty or default value.
    """
    keys = [(key.field, to_native_direction(key.type)) for key in spec.keys]

    options: Dict[str, Any] = {"name": spec.name}
    if spec.sparse is not None:
        options["sparse"] = spec.sparse
    if spec.expire_after_seconds is not None:
        options["expireAfterSeconds"] = spec.expire_after_seconds
    if spec.unique is not None:
        options["unique"] = spec.unique
    if spec.wildcard_projection is not None:
        options["wildcardProjection"] = dict(spec.wildcard_projection)
    if spec.background is not None:
        options["background"] = spec.background

    collation = to_native_collation(spec.collation)
    if collation is not None:
        options["collation"] = collation

    return IndexModel(keys, **options)


def reconstruct_spec(native: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Rebuild the declared fields of an index from its server description.

    Args:
        native: one document yielded by Collection.list_indexes()

    Returns:
        Partial IndexSpec fields: name, keys, sparse, expire_after_seconds, unique

    Raises:
        IndexDescriptionInvalid: a key value has no declared counterpart;
            nothing is returned for the other keys
    """
    name = native.get("name")
    keys = []
    for field, raw in native.get("key", {}).items():
        try:
            keys.append({"field": field, "type": to_declared_direction(raw)})
        except (InvalidDirectionValue, UnsupportedDirectionType) as e:
            raise IndexDescriptionInvalid(
                f"Unable to convert key type of field '{field}' in index '{name}'",
                operation="read",
                cause=e,
            ) from e

    # Presence in the description is authoritative: absent means None
    return {
        "name": name,
        "keys": keys,
        "sparse": native.get("sparse"),
        "expire_after_seconds": native.get("expireAfterSeconds"),
        "unique": native.get("unique"),
    }
