"""Tests for the type equivalence registry."""

import itertools

import pytest

from db_reconcile.schema.types import (
    EQUIVALENT_TYPES,
    canonical_type,
    equivalent_types,
    is_same_type,
)


class TestEquivalenceClasses:
    """Verify the registry is a partition of type tokens."""

    def test_no_token_in_two_classes(self) -> None:
        """Every token appears in exactly one class."""
        tokens = [t for types in EQUIVALENT_TYPES for t in types]
        assert len(tokens) == len(set(tokens))

    def test_nullable_bool_class(self) -> None:
        """Optional[int8], Optional[bool] and NullBool form one class."""
        assert equivalent_types("NullBool") == ("Optional[int8]", "Optional[bool]", "NullBool")

    def test_unregistered_token_is_own_class(self) -> None:
        """A token outside every class is equivalent only to itself."""
        assert equivalent_types("uint16") == ("uint16",)
        assert equivalent_types("datetime") == ("datetime",)


class TestIsSameType:
    """Verify reflexivity, symmetry and class separation."""

    @pytest.mark.parametrize("types", EQUIVALENT_TYPES)
    def test_symmetric_within_class(self, types: tuple[str, ...]) -> None:
        """Every pair in a class is equivalent in both directions."""
        for a, b in itertools.product(types, repeat=2):
            assert is_same_type(a, b)
            assert is_same_type(b, a)

    def test_reflexive_for_unregistered(self) -> None:
        """Unregistered tokens are equivalent to themselves."""
        assert is_same_type("uint64", "uint64")
        assert is_same_type("Optional[datetime]", "Optional[datetime]")

    def test_nullable_and_not_null_differ(self) -> None:
        """Nullability is part of the storage type."""
        assert not is_same_type("int", "Optional[int]")
        assert not is_same_type("str", "NullString")

    def test_signedness_differs(self) -> None:
        """Signed and unsigned tokens are not equivalent."""
        assert not is_same_type("int", "uint")
        assert not is_same_type("Optional[int]", "Optional[uint]")

    def test_width_differs(self) -> None:
        """int and int64 map to different column types."""
        assert not is_same_type("int", "int64")


class TestCanonicalType:
    """Verify canonical spelling selection."""

    def test_canonical_is_first_member(self) -> None:
        """The canonical spelling is the first member of the class."""
        assert canonical_type("float64") == "float"
        assert canonical_type("NullFloat64") == "Optional[float]"
        assert canonical_type("bool") == "int8"

    def test_unregistered_is_its_own_canonical(self) -> None:
        """Unregistered tokens canonicalise to themselves."""
        assert canonical_type("str") == "str"
