"""
Type Mapper Tests

Tests verify:
1. asc/desc round-trip through their numeric form
2. Special index types pass through untouched
3. Invalid numeric values and unsupported types are rejected
4. Collation mapping is nil-safe and only carries declared fields
"""

import pytest
from bson.int64 import Int64
from pymongo.collation import Collation as NativeCollation

from index_provider.core.errors import InvalidDirectionValue, UnsupportedDirectionType
from index_provider.core.type_mapper import (
    Direction,
    to_declared_direction,
    to_native_collation,
    to_native_direction,
)
from index_provider.db.schemas.index_spec import Collation


class TestDirectionMapping:

    @pytest.mark.parametrize("token", ["asc", "desc"])
    def test_sort_directions_round_trip(self, token):
        assert to_declared_direction(to_native_direction(token)) == token

    def test_direction_members_are_declared_tokens(self):
        assert [d.value for d in Direction] == ["asc", "desc"]
        assert to_native_direction(Direction.DESC) == -1

    def test_declared_direction_is_plain_string(self):
        assert type(to_declared_direction(1)) is str

    def test_asc_and_desc_native_values(self):
        assert to_native_direction("asc") == 1
        assert to_native_direction("desc") == -1

    @pytest.mark.parametrize("token", ["2dsphere", "2d", "hashed", "ASC", ""])
    def test_other_tokens_pass_through(self, token):
        assert to_native_direction(token) == token

    def test_string_native_value_passes_through(self):
        assert to_declared_direction("2dsphere") == "2dsphere"

    def test_int64_values_are_integers(self):
        assert to_declared_direction(Int64(-1)) == "desc"

    @pytest.mark.parametrize("raw", [0, 2, -2])
    def test_invalid_integer_rejected(self, raw):
        with pytest.raises(InvalidDirectionValue):
            to_declared_direction(raw)

    @pytest.mark.parametrize("raw", [1.0, -1.0, True, None, {"a": 1}])
    def test_unsupported_type_rejected(self, raw):
        with pytest.raises(UnsupportedDirectionType):
            to_declared_direction(raw)


class TestCollationMapping:

    def test_no_collation_maps_to_none(self):
        assert to_native_collation(None) is None

    def test_locale_only(self):
        """Absent fields stay out of the native document"""
        native = to_native_collation(Collation(locale="fr"))

        assert isinstance(native, NativeCollation)
        assert native.document == {"locale": "fr"}

    def test_all_fields(self):
        native = to_native_collation(Collation(
            locale="fr",
            case_level=True,
            case_first="upper",
            strength=3,
            numeric_ordering=True,
            alternate="shifted",
            max_variable="punct",
            normalization=False,
            backwards=True,
        ))

        assert native.document == {
            "locale": "fr",
            "caseLevel": True,
            "caseFirst": "upper",
            "strength": 3,
            "numericOrdering": True,
            "alternate": "shifted",
            "maxVariable": "punct",
            "normalization": False,
            "backwards": True,
        }
