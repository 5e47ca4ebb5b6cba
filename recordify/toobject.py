"""
Recordify ToObject Tools

Projects a live record to a plain, JSON-safe dict holding only data keys, with associations embedded
or stripped according to the record's display configuration.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import copy
import logging
from typing import Any, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .options import DisplayOptions
from .record import Association, Record
from .schema import AttributeDef, SchemaError
from .sentinels import MISSING, UNSET, UnsetType, ifnotunset
from .utils import class_name, fmt_type, is_function

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

class ToObject:
    """
    Record to plain dict projection.

    Runs a fixed pipeline of steps, each receiving the working dict and returning a new one:
        1. add_associations: clone related records into the output (show_joins only)
        2. add_properties: deep-copy every own key not set by step 1
        3. make_object: replace related records with their to_dict() snapshots (show_joins only)
        4. filter_joins: drop relation attributes the display configuration does not ask for
        5. filter_functions: drop function-typed values

    Attributes:
        context: Schema context exposing the `_attributes` registry.
        record: Source record.
        properties: Effective display configuration or None.
        object: The resulting plain dict.
    """

    def __init__(self, context: Any, record: Any,
                 properties: DisplayOptions | Mapping[str, Any] | None | UnsetType = UNSET) -> None:
        attributes = getattr(context, "_attributes", None)
        if not isinstance(attributes, abc.Mapping):
            raise TypeError(f"context must expose an _attributes Mapping, got {fmt_type(context)}")
        for name in ("own_keys", "associations"):
            if not hasattr(record, name):
                raise TypeError(f"record must implement {name}, got {fmt_type(record)}")

        self.context = context
        self.record = record
        self.properties = DisplayOptions.from_any(ifnotunset(properties, default=getattr(record, "_properties", None)))

        obj = {}
        obj = self.add_associations(obj)
        obj = self.add_properties(obj)
        obj = self.make_object(obj)
        obj = self.filter_joins(obj)
        obj = self.filter_functions(obj)
        self.object = obj

    @property
    def show_joins(self) -> bool:
        """True if display configuration exists and asks for joins."""
        return self.properties is not None and self.properties.show_joins

    def add_associations(self, obj: dict[str, Any]) -> dict[str, Any]:
        """
        Add association keys.

        For every association on the record, clone each related record of a to-many association into a list,
        or clone the single related record of a to-one association. An empty to-many association yields [].
        """
        if not self.show_joins:
            return obj

        obj = dict(obj)
        for name, state in self.record.associations.items():
            state = Association.from_any(state)

            if state is not None and state.is_collection:
                obj[name] = [_clone_record(item, name) for item in state.value]
                logger.debug("Materialized %d %r records for %s", len(obj[name]), name, class_name(self.record))
                continue

            related = getattr(self.record, name, MISSING) if name in self.record.own_keys() else MISSING
            if related is MISSING:
                raise SchemaError(f"Association {name!r} of {class_name(self.record)} has no related record")
            obj[name] = _clone_record(related, name)
            logger.debug("Materialized %r record for %s", name, class_name(self.record))

        return obj

    def add_properties(self, obj: dict[str, Any]) -> dict[str, Any]:
        """
        Copy over every own key of the record not already present in the output.

        Records stored as data, at any depth, are copied as plain dicts of their own keys.
        """
        obj, memo = dict(obj), {}
        for key in self.record.own_keys():
            if key in obj:
                continue
            obj[key] = _plain_deepcopy(getattr(self.record, key), memo)
        return obj

    def make_object(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Replace materialized association values with their to_dict() snapshots, keeping list order."""
        if not self.show_joins:
            return obj

        obj = dict(obj)
        for name in self.record.associations:
            value = obj[name]
            if isinstance(value, list):
                obj[name] = [_snapshot(item, name) for item in value]
            else:
                obj[name] = _snapshot(value, name)

        return obj

    def filter_joins(self, obj: dict[str, Any]) -> dict[str, Any]:
        """
        Remove non-joined associations.

        Rules applied in order to every relation attribute of the registry; each rule may remove the key:
            1. no display configuration and a to-many attribute: remove and go on with the next attribute
            2. display configuration without show_joins: remove
            3. display configuration with joins: remove when the join name is not allowed
        """
        properties = self.properties
        obj = dict(obj)

        for name, attr in self.context._attributes.items():
            attr = AttributeDef.from_any(attr)
            if not attr.is_association:
                continue

            if properties is None and attr.is_collection:
                _discard(obj, name, reason="no display options for collection")
                continue

            if properties is not None and not properties.show_joins:
                _discard(obj, name, reason="show_joins is off")

            if properties is not None and properties.joins is not None:
                join_name = attr.join_name(name)
                if not properties.allows(join_name):
                    _discard(obj, name, reason=f"join {join_name!r} not allowed")

        return obj

    def filter_functions(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Remove function-typed values."""
        return {k: v for k, v in obj.items() if not is_function(v)}


# Private Methods ------------------------------------------------------------------------------------------------------

def _clone_record(record: Any, name: str) -> Any:
    """Return record.clone(), raises SchemaError if the related value cannot be cloned"""
    fn = getattr(record, "clone", None)
    if not callable(fn):
        raise SchemaError(f"Association {name!r} value must be a record implementing clone(), "
                          f"got {fmt_type(record)}")
    return fn()


def _plain_deepcopy(value: Any, memo: dict | None = None) -> Any:
    """Deep copy which turns every Record into a dict of its deep-copied own keys"""
    memo = {} if memo is None else memo
    if id(value) in memo:
        return memo[id(value)]

    if isinstance(value, Record):
        dict_ = {}
        memo[id(value)] = dict_
        for key, item in value.own_values().items():
            dict_[key] = _plain_deepcopy(item, memo)
        return dict_

    if isinstance(value, dict):
        dict_ = {}
        memo[id(value)] = dict_
        for key, item in value.items():
            dict_[key] = _plain_deepcopy(item, memo)
        return dict_

    if isinstance(value, list):
        list_ = []
        memo[id(value)] = list_
        list_.extend(_plain_deepcopy(item, memo) for item in value)
        return list_

    if type(value) is tuple:
        return tuple(_plain_deepcopy(item, memo) for item in value)

    return copy.deepcopy(value, memo)


def _snapshot(record: Any, name: str) -> dict[str, Any]:
    """Return record.to_dict() as a plain dict, raises SchemaError if no snapshot is available"""
    fn = getattr(record, "to_dict", None)
    if not callable(fn):
        raise SchemaError(f"Association {name!r} value must implement to_dict(), got {fmt_type(record)}")

    dict_ = fn()
    if not isinstance(dict_, abc.Mapping):
        raise SchemaError(f"Association {name!r} to_dict() must return a Mapping, but got {fmt_type(dict_)}")
    return {**dict_}


def _discard(obj: dict[str, Any], name: str, reason: str) -> None:
    if obj.pop(name, MISSING) is not MISSING:
        logger.debug("Removed association %r: %s", name, reason)


# Methods --------------------------------------------------------------------------------------------------------------

def to_object(context: Any, record: Any, *,
              properties: DisplayOptions | Mapping[str, Any] | None | UnsetType = UNSET) -> dict[str, Any]:
    """
    Return a plain dict snapshot of a record, containing just its data values.

    Useful for doing operations on the current values of a record minus the record behavior: API responses,
    logging, equality checks. Every value in the result is an independent deep copy of the source.

    Args:
        context: Schema context exposing an `_attributes` registry of AttributeDef (or descriptor mappings).
        record: Source record exposing own_keys(), `associations` and optional `_properties`.
        properties: Display configuration overriding record._properties for this call; None projects
                    as if the record had no display configuration.

    Returns:
        Plain dict with data keys and, when joins are shown, nested plain association snapshots.

    Raises:
        TypeError: If context or record do not expose the required interface.
        SchemaError: If an association value is missing or has no clone()/to_dict() capability.

    Examples:
        >>> schema = Schema({"posts": {"collection": "Post"}, "profile": {"model": "Profile"}})
        >>> user = schema.new({"id": 1, "name": "a"},
        ...                   associations={"posts": Association([Record(id=101), Record(id=102)])},
        ...                   properties=DisplayOptions(show_joins=True))
        >>> to_object(schema, user)
        {'posts': [{'id': 101}, {'id': 102}], 'id': 1, 'name': 'a'}

        >>> # No display configuration: collections are stripped, to-one values kept as is
        >>> to_object(schema, schema.new({"id": 1, "profile": 7}))
        {'id': 1, 'profile': 7}

    Note:
        - Cyclic association graphs are not guarded and end in RecursionError
        - joins without show_joins=True never adds associations, it can only remove keys
    """
    return ToObject(context, record, properties=properties).object
