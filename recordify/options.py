"""
Recordify Display Options
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
from dataclasses import dataclass, replace as dataclasses_replace
from typing import Any, Iterable, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class DisplayOptions:
    """
    Per-record display configuration for to_object() projection.

    Attributes:
        show_joins: Materialize associations into the output. When False, every relation attribute
                    is removed from the output.
        joins: Allow-list of join names (lowercased target type name, or attribute name when the attribute
               has no target). None allows every join.

    Note:
        joins without show_joins=True is inert for inclusion: associations are not materialized,
        the allow-list can only remove keys.

    Examples:
        >>> opts = DisplayOptions(show_joins=True, joins=["profile"])
        >>> opts.joins
        ('profile',)
        >>> DisplayOptions.from_mapping({"showJoins": True}).allows("post")
        True
    """
    show_joins: bool = False
    joins: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        """Normalize joins to a tuple of str and validate types."""
        object.__setattr__(self, "show_joins", bool(self.show_joins))

        if self.joins is None:
            return
        if isinstance(self.joins, (str, bytes)) or not isinstance(self.joins, abc.Iterable):
            raise TypeError(f"DisplayOptions.joins must be an iterable of str or None, got {fmt_type(self.joins)}")
        joins = tuple(self.joins)
        for name in joins:
            if not isinstance(name, str):
                raise TypeError(f"DisplayOptions.joins items must be str, got {fmt_value(name)}")
        object.__setattr__(self, "joins", joins)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "DisplayOptions":
        """
        Create options from a mapping with `showJoins` (or `show_joins`) and `joins` keys.

        Raises:
            TypeError: If mapping is not a Mapping.
            ValueError: If mapping contains unknown keys.
        """
        if not isinstance(mapping, abc.Mapping):
            raise TypeError(f"mapping must be a Mapping, got {fmt_type(mapping)}")

        aliases = {"showJoins": "show_joins", "show_joins": "show_joins", "joins": "joins"}
        unknown = [k for k in mapping if k not in aliases]
        if unknown:
            raise ValueError(f"Unknown display option keys: {fmt_value(unknown)}")

        kwargs = {aliases[k]: v for k, v in mapping.items()}
        return cls(**kwargs)

    @classmethod
    def from_any(cls, value: "DisplayOptions | Mapping[str, Any] | None") -> "DisplayOptions | None":
        """Return None for None, options as is, or options created from a mapping."""
        if value is None or isinstance(value, DisplayOptions):
            return value
        if isinstance(value, abc.Mapping):
            return cls.from_mapping(value)
        raise TypeError(f"Display options must be DisplayOptions, Mapping or None, got {fmt_type(value)}")

    def merge(self, *,
              show_joins: bool | None = None,
              joins: Iterable[str] | None = None) -> "DisplayOptions":
        """
        Create a new DisplayOptions instance with updated attributes.

        Attributes passed as None stay unchanged; use DisplayOptions(...) directly to reset joins to None.

        Returns:
            New DisplayOptions instance with merged configuration.
        """
        kwargs = {}
        if show_joins is not None:
            kwargs["show_joins"] = show_joins
        if joins is not None:
            kwargs["joins"] = joins
        return dataclasses_replace(self, **kwargs)

    def allows(self, join_name: str) -> bool:
        """True if the join name passes the allow-list."""
        return self.joins is None or join_name in self.joins
