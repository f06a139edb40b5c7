"""
Type Mapper
Converts declared index values into what pymongo expects, and back.

Direction tokens:
- "asc"  <-> 1
- "desc" <-> -1
- any other string (2dsphere, hashed, 2d, ...) is passed through verbatim

The numeric case is a strict round trip. The string case is open because the
server accepts index kinds beyond the two sort directions.
"""

from enum import Enum
from typing import Any, Optional, Union

from pymongo.collation import Collation as NativeCollation

from index_provider.core.errors import InvalidDirectionValue, UnsupportedDirectionType
from index_provider.db.schemas.index_spec import Collation


class Direction(str, Enum):
    """Declared key types with a numeric native counterpart"""
    ASC = "asc"     # 1
    DESC = "desc"   # -1


def to_native_direction(token: str) -> Union[int, str]:
    """Map a declared key type to the value used in the index key document"""
    if token == Direction.ASC:
        return 1
    if token == Direction.DESC:
        return -1
    return token


def to_declared_direction(raw: Any) -> str:
    """
    Map a value read from an index key document back to a declared key type.

    Raises:
        InvalidDirectionValue: integer other than 1 or -1
        UnsupportedDirectionType: neither an integer nor a string
    """
    # bool is an int subclass; True must not read as ascending
    if isinstance(raw, int) and not isinstance(raw, bool):
        if raw == 1:
            return Direction.ASC.value
        if raw == -1:
            return Direction.DESC.value
        raise InvalidDirectionValue(f"integer index type must be 1 or -1, got {raw}")

    if isinstance(raw, str):
        return raw

    raise UnsupportedDirectionType(
        f"index type must be an integer or a string, got {type(raw).__name__}"
    )


def to_native_collation(collation: Optional[Collation]) -> Optional[NativeCollation]:
    """
    Build pymongo's Collation from the declared one.

    Absent optional fields are left out of the collation document so the
    server applies its own defaults. No collation at all returns None.
    """
    if collation is None:
        return None

    return NativeCollation(
        collation.locale,
        caseLevel=collation.case_level,
        caseFirst=collation.case_first,
        strength=collation.strength,
        numericOrdering=collation.numeric_ordering,
        alternate=collation.alternate,
        maxVariable=collation.max_variable,
        normalization=collation.normalization,
        backwards=collation.backwards,
    )
