"""
Utilities shared across the prettyval modules.

Contains functions used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.

    Parameters:
        obj (Any): An object or a class.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'

        >>> class Point: ...
        >>> class_name(Point())
        'Point'
    """
    cls = obj if isinstance(obj, type) else obj.__class__
    return cls.__name__


def safe_repr(obj: Any) -> tuple[str, bool]:
    """
    Defensive repr() call - handle broken __repr__ methods gracefully.

    Returns:
        A (text, ok) pair. When the object's __repr__ raises, text is a placeholder
        naming the type and the exception, and ok is False.
    """
    try:
        return repr(obj), True
    except Exception as e:
        return f"<{type(obj).__name__} object (repr failed: {type(e).__name__})>", False
