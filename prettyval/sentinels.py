"""
Sentinel object for configuration overrides.

`merge()` methods of the frozen configuration classes (Printer, Styles, TimeFormatter)
accept UNSET as the default of every override, so that None stays a legitimate value
(for example `TimeFormatter.merge(now=None)` resets the reference instant to "current time").

Example:
    >>> printer = Printer().merge(max_width=40)         # other fields inherited
    >>> formatter = TimeFormatter().merge(now=None)      # explicit None, not UNSET
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Final

__all__ = [
    'UNSET',
    'UnsetType',
    'ifnotunset',
]


# Classes --------------------------------------------------------------------------------------------------------------

class UnsetType:
    """
    Sentinel type for UNSET.

    Used to distinguish between 'not provided' and 'explicitly set to None'.
    Singleton, compared by identity, falsy.
    """
    __slots__ = ('_name',)

    _instance: 'UnsetType | None' = None

    def __new__(cls) -> 'UnsetType':
        """Ensures singleton behavior."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._name = "UNSET"
        return cls._instance

    def __repr__(self) -> str:
        return f'<{self._name}>'

    def __eq__(self, other: Any) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple:
        """Ensure pickling returns the singleton instance."""
        return (self.__class__, ())


# Sentinel Objects -----------------------------------------------------------------------------------------------------

UNSET: Final[UnsetType] = UnsetType()
"""
Sentinel representing an unprovided override.

Use with identity check: `if arg is UNSET:`
"""


# Helper Functions -----------------------------------------------------------------------------------------------------

def ifnotunset(value: Any, *, default: Any = None) -> Any:
    """
    Return value if it's not UNSET, otherwise return default.

    Args:
        value: The value to check. If not UNSET, this value is returned.
        default: The fallback value when value is UNSET.

    Example:
        >>> ifnotunset(UNSET, default=100)
        100
        >>> ifnotunset(None, default=100) is None
        True
    """
    return default if value is UNSET else value
