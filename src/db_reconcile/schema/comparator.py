"""Field-level and index comparison between live and desired field lists.

Pure logic -- no I/O, no dialect.  Both functions key fields by ``column``.

Usage:
    from db_reconcile.schema.comparator import compare_fields, compare_indexes

    changes = compare_fields(old_fields, new_fields)
    index_changes = compare_indexes(old_fields, new_fields)
"""

from dataclasses import dataclass, field

from db_reconcile.schema.models import FieldSpec, IndexSpec


# ------------------------------------------------------------------
# Field changes
# ------------------------------------------------------------------


@dataclass
class FieldChange:
    """A classified column change.

    ``old`` is None for an added column, ``new`` is None for a dropped one,
    and both are set for a modified column.
    """

    old: FieldSpec | None
    new: FieldSpec | None

    @property
    def is_added(self) -> bool:
        return self.old is None and self.new is not None

    @property
    def is_dropped(self) -> bool:
        return self.old is not None and self.new is None

    @property
    def is_modified(self) -> bool:
        return self.old is not None and self.new is not None


def compare_fields(old_fields: list[FieldSpec], new_fields: list[FieldSpec]) -> list[FieldChange]:
    """Classify every column as added, modified or dropped.

    Added and modified changes come first in desired declaration order,
    followed by dropped changes in live declaration order.  Unchanged
    columns produce nothing.

    Examples:
        >>> old = [FieldSpec(name="age", type="Optional[int]")]
        >>> new = [FieldSpec(name="email", type="str")]
        >>> [(c.is_added, c.is_dropped) for c in compare_fields(old, new)]
        [(True, False), (False, True)]
    """
    old_by_column = {f.column: f for f in old_fields}
    new_columns = {f.column for f in new_fields}

    changes: list[FieldChange] = []
    for new in new_fields:
        old = old_by_column.get(new.column)
        if new.is_different(old):
            changes.append(FieldChange(old=old, new=new))
    for old in old_fields:
        if old.column not in new_columns:
            changes.append(FieldChange(old=old, new=None))
    return changes


# ------------------------------------------------------------------
# Index changes
# ------------------------------------------------------------------


@dataclass
class IndexChanges:
    """Indexes to create and drop for one table, keyed by index name.

    Both maps keep the order in which index names were first seen while
    walking the fields.
    """

    added: dict[str, IndexSpec] = field(default_factory=dict)
    dropped: dict[str, IndexSpec] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.dropped)


def _accumulate(target: dict[str, IndexSpec], name: str, column: str, unique: bool) -> None:
    if name not in target:
        target[name] = IndexSpec(name=name, unique=unique)
    target[name].columns.append(column)


def _collect(
    target: dict[str, IndexSpec],
    names: list[str],
    other_names: list[str],
    column: str,
    unique: bool,
) -> None:
    for name in names:
        if name not in other_names:
            _accumulate(target, name, column, unique)


def compare_indexes(old_fields: list[FieldSpec], new_fields: list[FieldSpec]) -> IndexChanges:
    """Compute named indexes to add and drop between two field lists.

    Multi-column indexes accumulate their columns across fields sharing
    the same index name, in field order.  Columns being dropped contribute
    to the drop descriptors, and a drop is suppressed when any of its
    columns is being dropped.
    Examples:
        >>> old = [FieldSpec(name="a", type="int", raw_indexes=[""])]
        >>> new = [FieldSpec(name="a", type="int", unique=True)]
        >>> changes = compare_indexes(old, new)
        >>> list(changes.dropped), list(changes.added)
        (['a'], ['a'])
    """
    old_by_column = {f.column: f for f in old_fields}
    new_columns = {f.column for f in new_fields}
    changes = IndexChanges()

    for new in new_fields:
        old = old_by_column.get(new.column)
        old_indexes = old.indexes() if old else []
        old_unique = old.unique_indexes() if old else []
        new_indexes, new_unique = new.indexes(), new.unique_indexes()

        _collect(changes.dropped, old_indexes, new_indexes, new.column, unique=False)
        _collect(changes.dropped, old_unique, new_unique, new.column, unique=True)
        _collect(changes.added, new_indexes, old_indexes, new.column, unique=False)
        _collect(changes.added, new_unique, old_unique, new.column, unique=True)

    dropped_columns = [f for f in old_fields if f.column not in new_columns]
    for old in dropped_columns:
        _collect(changes.dropped, old.indexes(), [], old.column, unique=False)
        _collect(changes.dropped, old.unique_indexes(), [], old.column, unique=True)

    dropped_names = {f.column for f in dropped_columns}
    changes.dropped = {
        name: index
        for name, index in changes.dropped.items()
        if not any(column in dropped_names for column in index.columns)
    }
    return changes
