"""
Recordify Records

A Record holds its data keys as plain instance attributes and keeps its schema context, association
state and display configuration aside in slots, so that only data keys count as the record's own keys.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import copy
import json
from dataclasses import dataclass
from typing import Any, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .options import DisplayOptions
from .schema import Schema
from .sentinels import UNSET, UnsetType
from .utils import class_name, fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class Association:
    """
    Association state of a record.

    Attributes:
        value: Related records of a to-many association. None marks a to-one association whose related
               record lives on the owning record under the association name.
    """
    value: list | None = None

    def __post_init__(self) -> None:
        if self.value is None:
            return
        if isinstance(self.value, (str, bytes, abc.Mapping)) or not isinstance(self.value, abc.Iterable):
            raise TypeError(f"Association.value must be a sequence of records or None, got {fmt_type(self.value)}")
        self.value = list(self.value)

    @property
    def is_collection(self) -> bool:
        """True for to-many association state."""
        return self.value is not None

    @classmethod
    def from_any(cls, state: Any) -> "Association | None":
        """
        Normalize association state.

        Accepts None (to-one), an Association, a mapping with a `value` key (to-many) or without it (to-one),
        or a list/tuple of records (to-many).
        """
        if state is None or isinstance(state, Association):
            return state
        if isinstance(state, abc.Mapping):
            if "value" not in state:
                return None
            return cls(value=state["value"])
        if isinstance(state, (list, tuple)):
            return cls(value=state)
        raise TypeError(f"Association state must be an Association, Mapping, list or None, got {fmt_type(state)}")


class Record:
    """
    Model instance with data keys, association state and display configuration.

    Data keys are the record's own keys and live in the instance __dict__ in insertion order.
    The schema context (`_context`), association state (`associations`) and display configuration
    (`_properties`) are metadata and never part of own keys.

    Examples:
        >>> schema = Schema({"id": "integer", "posts": {"collection": "Post"}})
        >>> post = Record(id=101)
        >>> user = Record({"id": 1}, context=schema,
        ...               associations={"posts": Association([post])},
        ...               properties={"showJoins": True})
        >>> user.to_object()
        {'posts': [{'id': 101}], 'id': 1}
    """
    __slots__ = ("__dict__", "_context", "associations", "_display")

    _metadata = frozenset({"associations", "_context", "_display", "_properties"})

    def __init__(self,
                 values: Mapping[str, Any] | None = None,
                 *,
                 context: Schema | None = None,
                 associations: Mapping[str, Any] | None = None,
                 properties: DisplayOptions | Mapping[str, Any] | None = None,
                 **fields: Any) -> None:
        if values is not None and not isinstance(values, abc.Mapping):
            raise TypeError(f"values must be a Mapping or None, got {fmt_type(values)}")
        if context is not None and not hasattr(context, "_attributes"):
            raise TypeError(f"context must expose an attribute registry, got {fmt_type(context)}")
        if associations is not None and not isinstance(associations, abc.Mapping):
            raise TypeError(f"associations must be a Mapping or None, got {fmt_type(associations)}")

        self._context = context
        self.associations = {name: Association.from_any(state) for name, state in (associations or {}).items()}
        self._properties = properties

        for key, value in {**(values or {}), **fields}.items():
            if not isinstance(key, str):
                raise TypeError(f"Record keys must be str, got {fmt_value(key)}")
            self._check_key(key)
            self.__dict__[key] = value

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in self._metadata:
            self._check_key(name)
        object.__setattr__(self, name, value)

    @classmethod
    def _check_key(cls, key: str) -> None:
        """Reject data keys which would hide record metadata or class attributes."""
        if key in cls._metadata or hasattr(cls, key):
            raise ValueError(f"Record key {key!r} is reserved for record metadata or methods")

    @property
    def _properties(self) -> DisplayOptions | None:
        """Display configuration or None."""
        return self._display

    @_properties.setter
    def _properties(self, value: DisplayOptions | Mapping[str, Any] | None) -> None:
        self._display = DisplayOptions.from_any(value)

    def __repr__(self) -> str:
        items = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"{class_name(self)}({items})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Record) or type(other) is not type(self):
            return NotImplemented
        return self.__dict__ == other.__dict__

    __hash__ = None

    def __copy__(self) -> "Record":
        item = self._blank()
        item.__dict__.update(self.__dict__)
        return item

    def __deepcopy__(self, memo: dict) -> "Record":
        item = self._blank()
        memo[id(self)] = item
        for key, value in self.__dict__.items():
            item.__dict__[key] = copy.deepcopy(value, memo)
        return item

    def _blank(self) -> "Record":
        """Empty instance of the same class sharing this record's metadata."""
        item = self.__class__.__new__(self.__class__)
        item._context = self._context
        item.associations = self.associations
        item._display = self._display
        return item

    def own_keys(self) -> list[str]:
        """Data keys in insertion order."""
        return list(self.__dict__)

    def own_values(self) -> dict[str, Any]:
        """Shallow dict of data keys and values."""
        return dict(self.__dict__)

    def clone(self) -> "Record":
        """
        Structural clone: same class and metadata, every own key deep-copied.

        Schema context, association state and display configuration are shared with the source record.
        """
        return copy.deepcopy(self)

    def to_object(self, *, properties: DisplayOptions | Mapping[str, Any] | None | UnsetType = UNSET) -> dict:
        """
        Project the record to a plain dict.

        Args:
            properties: Display configuration overriding the record's own `_properties` for this call.
                        Pass None to project as if no configuration was set.

        Returns:
            Plain dict snapshot, see recordify.toobject.to_object().
        """
        from .toobject import to_object

        context = self._context if self._context is not None else Schema()
        return to_object(context, self, properties=properties)

    def to_dict(self) -> dict:
        """Plain snapshot of the record, invoked on associated records during projection."""
        return self.to_object()

    def to_json(self, **kwargs: Any) -> str:
        """Serialize the plain snapshot with json.dumps(); kwargs are passed through."""
        return json.dumps(self.to_dict(), **kwargs)
