"""
Sentinel objects for distinguishing between unset values, None, and missing record keys.

Sentinels:
    UNSET: Represents an unprovided optional argument (distinguishes from None)
    MISSING: Marks a key which is absent on a record (distinguishes from a key holding None)

Helper Functions:
    ifnotunset: Return default if value is UNSET, otherwise return value

Example:
    >>> def project(record, properties: DisplayOptions | None | UnsetType = UNSET) -> dict:
    ...     properties = ifnotunset(properties, default=record._properties)
"""

from typing import Any, Final

__all__ = [
    'UNSET',
    'MISSING',
    'UnsetType',
    'MissingType',
    'ifnotunset',
]


# Base Sentinel --------------------------------------------------------------------------------------------------------

class _SentinelBase:
    """
    Base class for all sentinel objects.

    Sentinels are falsy singletons compared by identity.
    """
    __slots__ = ()
    _instance = None
    _name = "SENTINEL"

    def __new__(cls) -> '_SentinelBase':
        """Ensures singleton behavior per sentinel type."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return f'<{self._name}>'

    def __eq__(self, other: Any) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> '_SentinelBase':
        return self

    def __deepcopy__(self, memo: dict) -> '_SentinelBase':
        return self

    def __reduce__(self) -> tuple:
        """Ensure pickling returns the singleton instance."""
        return (self.__class__, ())


# Sentinel Types -----------------------------------------------------------------------------------------------------

class UnsetType(_SentinelBase):
    """
    Sentinel type for UNSET.

    Used to distinguish between 'not provided' and 'explicitly set to None'.
    """
    __slots__ = ()
    _instance: 'UnsetType | None' = None
    _name = "UNSET"


class MissingType(_SentinelBase):
    """
    Sentinel type for MISSING.

    Marks a record key which is not present at all.
    """
    __slots__ = ()
    _instance: 'MissingType | None' = None
    _name = "MISSING"


# Sentinel Objects -----------------------------------------------------------------------------------------------------

UNSET: Final[UnsetType] = UnsetType()
"""
Sentinel representing an unprovided optional argument.

Use with identity check: `if arg is UNSET:`
"""

MISSING: Final[MissingType] = MissingType()
"""
Sentinel representing a key absent on a record.
"""


# Helper Functions -----------------------------------------------------------------------------------------------------

def ifnotunset(value: Any, *, default: Any = None) -> Any:
    """
    Return value if it's not UNSET, otherwise return default.

    Example:
        >>> ifnotunset(UNSET, default=30)
        30
        >>> ifnotunset(None, default=30) is None
        True
    """
    return default if value is UNSET else value
