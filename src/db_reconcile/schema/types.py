"""Type equivalence registry.

Declares which type spellings denote the same physical column so that the
differ does not emit a MODIFY for a column whose type is merely spelled
differently between the live catalog and the desired model.

The first member of each class is the canonical spelling: it is the token
chosen when a live column is projected into a ``FieldSpec`` and when models
are printed back out as source.

Usage:
    from db_reconcile.schema.types import is_same_type

    is_same_type("Optional[bool]", "NullBool")  # True
    is_same_type("int", "int64")                # False
"""

EQUIVALENT_TYPES: tuple[tuple[str, ...], ...] = (
    ("Optional[int8]", "Optional[bool]", "NullBool"),
    ("int8", "bool"),
    ("Optional[uint]", "Optional[uint32]"),
    ("uint", "uint32"),
    ("Optional[int]", "Optional[int32]"),
    ("int", "int32"),
    ("Optional[int64]", "NullInt64"),
    ("Optional[str]", "NullString"),
    ("Optional[float]", "Optional[float32]", "Optional[float64]", "NullFloat64"),
    ("float", "float32", "float64"),
)


def _build_type_classes() -> dict[str, tuple[str, ...]]:
    classes: dict[str, tuple[str, ...]] = {}
    for types in EQUIVALENT_TYPES:
        for name in types:
            if name in classes:
                raise ValueError(f"Type {name!r} registered in more than one class")
            classes[name] = types
    return classes


_TYPE_CLASSES: dict[str, tuple[str, ...]] = _build_type_classes()


def equivalent_types(type_name: str) -> tuple[str, ...]:
    """Return the equivalence class of *type_name*.

    A token that is not registered forms a class of its own.

    Examples:
        >>> equivalent_types("NullString")
        ('Optional[str]', 'NullString')
        >>> equivalent_types("uint8")
        ('uint8',)
    """
    return _TYPE_CLASSES.get(type_name, (type_name,))


def canonical_type(type_name: str) -> str:
    """Return the canonical (first) spelling for *type_name*."""
    return equivalent_types(type_name)[0]


def is_same_type(t1: str, t2: str) -> bool:
    """Report whether two type tokens denote the same storage type.

    Reflexive for every token and symmetric for registered tokens.

    Examples:
        >>> is_same_type("Optional[int8]", "NullBool")
        True
        >>> is_same_type("int", "uint")
        False
    """
    return t1 == t2 or t2 in _TYPE_CLASSES.get(t1, ())
