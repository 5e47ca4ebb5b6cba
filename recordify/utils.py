"""
Recordify Utilities shared across the package.

Contains functions used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import functools
import inspect
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(
    obj: Any,
    fully_qualified: bool = False,
    fully_qualified_builtins: bool = False,
) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.

    Parameters:
        obj (Any): An object or a class.
        fully_qualified (bool): If true, returns the fully qualified name for user objects or classes.
        fully_qualified_builtins (bool): If true, returns the fully qualified name for builtin objects or classes.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'
        >>> class_name(10, fully_qualified_builtins=True)
        'builtins.int'
        >>> class C: ...
        >>> class_name(C())
        'C'
        >>> class_name(C)
        'C'
    """
    cls = obj if isinstance(obj, type) else obj.__class__

    if cls.__module__ == "builtins":
        qualified = fully_qualified_builtins
    else:
        qualified = fully_qualified

    if qualified:
        return cls.__module__ + "." + cls.__name__
    return cls.__name__


def fmt_type(obj: Any) -> str:
    """Format type information for exception messages.

    Examples:
        >>> fmt_type(42)
        '<type: int>'
        >>> fmt_type(int)
        '<type: int>'
    """
    target_type = obj if isinstance(obj, type) else type(obj)
    try:
        type_name = target_type.__name__
    except AttributeError:
        type_name = str(target_type)
    return f"<type: {type_name}>"


def fmt_value(x: Any, max_repr: int = 120) -> str:
    """
    Format a single value as a type-value pair for exception messages.

    Broken __repr__ methods are handled gracefully with fallback formatting.

    Examples:
        >>> fmt_value(42)
        '<int: 42>'
        >>> fmt_value("hello world", max_repr=8)
        "<str: 'hello'...>"
    """
    t = type(x).__name__
    try:
        base_repr = repr(x)
    except Exception as e:
        base_repr = f"<{t} object (repr failed: {type(e).__name__})>"

    base_repr = base_repr.replace(">", "\\>")

    if max_repr >= 0 and len(base_repr) > max_repr:
        # Keep the closing quote outside of the ellipsis for str reprs
        if len(base_repr) >= 2 and base_repr[0] == base_repr[-1] and base_repr[0] in "'\"":
            base_repr = base_repr[:max(max_repr - 2, 1)] + base_repr[0] + "..."
        else:
            base_repr = base_repr[:max_repr] + "..."
    return f"<{t}: {base_repr}>"


def is_function(value: Any) -> bool:
    """
    Return True if value is function-typed, i.e. behavior rather than data.

    Covers plain and builtin functions, bound methods, lambdas, partials and classes. Instances which happen
    to define __call__ are treated as data.
    """
    if inspect.isroutine(value) or inspect.isclass(value):
        return True
    return isinstance(value, functools.partial)
