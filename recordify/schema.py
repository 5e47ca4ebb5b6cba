"""
Recordify Schema

Attribute registry describing which fields of a record type are plain data and which are associations
to other record types (to-one `model` or to-many `collection`).
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

class SchemaError(TypeError):
    """
    Schema inconsistency detected while projecting a record.

    Raised when a relation attribute lacks a populated association value or when an associated value
    lacks a working to_dict() snapshot capability.
    """


@dataclass(frozen=True)
class AttributeDef:
    """
    Attribute descriptor.

    Attributes:
        type: Plain data type name, e.g. "string" or "integer".
        model: Target type name of a to-one association.
        collection: Target type name of a to-many association.
        via: Attribute name on the target type which points back to this one.
    """
    type: str | None = None
    model: str | None = None
    collection: str | None = None
    via: str | None = None

    def __post_init__(self) -> None:
        """Validate field types and reject empty names."""
        for f in fields(self):
            val = getattr(self, f.name)
            if val is None:
                continue
            if not isinstance(val, str):
                raise TypeError(f"AttributeDef.{f.name} must be a str or None, got {fmt_type(val)}")
            if not val:
                raise ValueError(f"AttributeDef.{f.name} must be a non-empty str")

    @classmethod
    def from_any(cls, value: "AttributeDef | str | Mapping[str, Any]") -> "AttributeDef":
        """
        Create descriptor from a type name, a mapping of descriptor fields, or return descriptor as is.

        Examples:
            >>> AttributeDef.from_any("string")
            AttributeDef(type='string', model=None, collection=None, via=None)
            >>> AttributeDef.from_any({"collection": "Post", "via": "author"}).is_collection
            True
        """
        if isinstance(value, AttributeDef):
            return value
        if isinstance(value, str):
            return cls(type=value)
        if isinstance(value, abc.Mapping):
            known = {f.name for f in fields(cls)}
            unknown = [k for k in value if k not in known]
            if unknown:
                raise ValueError(f"Unknown attribute descriptor keys: {fmt_value(unknown)}")
            return cls(**value)
        raise TypeError(f"Attribute descriptor must be an AttributeDef, str or Mapping, got {fmt_type(value)}")

    @property
    def is_association(self) -> bool:
        """True for relation attributes (model or collection)."""
        return self.model is not None or self.collection is not None

    @property
    def is_collection(self) -> bool:
        """True for to-many relation attributes."""
        return self.collection is not None

    @property
    def target(self) -> str | None:
        """Target type name; collection wins over model."""
        if self.collection is not None:
            return self.collection
        return self.model

    def join_name(self, attr_name: str) -> str:
        """Join identifier matched against DisplayOptions.joins, the lowercased target or attr_name."""
        target = self.target
        return target.lower() if target is not None else attr_name


class Schema:
    """
    Read-only attribute registry of a record type.

    The registry is kept under `_attributes` and maps attribute name to AttributeDef, in declaration order.

    Examples:
        >>> user = Schema({
        ...     "id": "integer",
        ...     "name": "string",
        ...     "profile": {"model": "Profile"},
        ...     "posts": {"collection": "Post", "via": "author"},
        ... }, identity="user")
        >>> user.associations
        ('profile', 'posts')
        >>> user.join_name("posts")
        'post'
    """

    def __init__(self,
                 attributes: Mapping[str, AttributeDef | str | Mapping[str, Any]] | None = None,
                 identity: str | None = None) -> None:
        if attributes is None:
            attributes = {}
        if not isinstance(attributes, abc.Mapping):
            raise TypeError(f"attributes must be a Mapping or None, got {fmt_type(attributes)}")
        if identity is not None and not isinstance(identity, str):
            raise TypeError(f"identity must be a str or None, got {fmt_type(identity)}")

        registry = {}
        for name, descriptor in attributes.items():
            if not isinstance(name, str):
                raise TypeError(f"Attribute name must be a str, got {fmt_value(name)}")
            registry[name] = AttributeDef.from_any(descriptor)

        self._attributes = MappingProxyType(registry)
        self.identity = identity.lower() if identity else None

    def __repr__(self) -> str:
        return f"Schema(identity={self.identity!r}, attributes={list(self._attributes)!r})"

    def __contains__(self, name: str) -> bool:
        return name in self._attributes

    def __copy__(self) -> "Schema":
        return self

    def __deepcopy__(self, memo: dict) -> "Schema":
        return self

    @property
    def attributes(self) -> Mapping[str, AttributeDef]:
        """Read-only view of the attribute registry."""
        return self._attributes

    @property
    def associations(self) -> tuple[str, ...]:
        """Names of relation attributes."""
        return tuple(k for k, v in self._attributes.items() if v.is_association)

    @property
    def collections(self) -> tuple[str, ...]:
        """Names of to-many relation attributes."""
        return tuple(k for k, v in self._attributes.items() if v.is_collection)

    @property
    def models(self) -> tuple[str, ...]:
        """Names of to-one relation attributes."""
        return tuple(k for k, v in self._attributes.items() if v.is_association and not v.is_collection)

    def is_association(self, name: str) -> bool:
        """True if name is a declared relation attribute, False for plain or unknown attributes."""
        attr = self._attributes.get(name)
        return attr is not None and attr.is_association

    def join_name(self, name: str) -> str:
        """Join identifier of a declared attribute, raises KeyError for unknown names."""
        return self._attributes[name].join_name(name)

    def new(self, values: Mapping[str, Any] | None = None, *,
            associations: Mapping[str, Any] | None = None,
            properties: Any = None,
            record_class: type | None = None):
        """
        Create a record bound to this schema.

        Args:
            values: Data keys of the record.
            associations: Association name to association state, see Association.from_any().
            properties: Display configuration, see DisplayOptions.from_any().
            record_class: Record subclass to instantiate, defaults to Record.

        Returns:
            Record instance with this schema as its context.
        """
        from .record import Record

        record_class = record_class or Record
        if not (isinstance(record_class, type) and issubclass(record_class, Record)):
            raise TypeError(f"record_class must be a Record subclass, got {fmt_value(record_class)}")
        return record_class(values, context=self, associations=associations, properties=properties)
