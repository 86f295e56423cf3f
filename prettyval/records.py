"""
Record schema introspection: which objects render as `Name{field: value}` and with which fields.

A record is a dataclass instance, a named tuple, or an instance of a user-defined class carrying
instance data in `__dict__` or `__slots__`. Only public fields (not starting with `_`) are listed.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import dataclasses
import functools
import inspect
import logging
import sys
import types
import typing
from enum import Enum
from typing import Any, NamedTuple, Union

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

class RecordField(NamedTuple):
    """
    One public field of a record.

    Attributes:
        name: Field name.
        value: Field value, None when reading it failed.
        annotation: Declared type resolved from the class annotations, None when undeclared.
        error: Exception raised while reading the field, None on success.
    """
    name: str
    value: Any
    annotation: Any = None
    error: BaseException | None = None


# Methods --------------------------------------------------------------------------------------------------------------

def is_record(obj: Any) -> bool:
    """
    Check whether obj is rendered as a record.

    Classes, functions, modules, enum members and instances of builtin or standard library
    classes are not records, except dataclasses and named tuples.

    Examples:
        >>> from collections import namedtuple
        >>> is_record(namedtuple("P", "x y")(1, 2))
        True
        >>> is_record([1, 2])
        False
        >>> is_record(len)
        False
    """
    if isinstance(obj, type):
        return False
    if dataclasses.is_dataclass(obj) or is_namedtuple(obj):
        return True
    if isinstance(obj, Enum):
        return False
    if (inspect.isroutine(obj) or inspect.ismodule(obj) or inspect.isframe(obj)
            or inspect.iscode(obj) or inspect.istraceback(obj)):
        return False
    if _is_stdlib_class(type(obj)):
        return False
    return hasattr(obj, "__dict__") or bool(_slot_names(type(obj)))


def is_namedtuple(obj: Any) -> bool:
    """Named tuple instance, either collections.namedtuple or typing.NamedTuple."""
    return isinstance(obj, tuple) and isinstance(getattr(type(obj), "_fields", None), tuple)


def record_fields(obj: Any) -> list[RecordField]:
    """
    Public fields of a record in declaration order.

    Dataclasses list their fields, named tuples their `_fields`; other objects list
    their instance `__dict__` entries followed by the initialized `__slots__`.
    A field whose read raises is reported with the exception in `error`.
    """
    hints = declared_types(type(obj))

    if is_namedtuple(obj):
        return [RecordField(name, value, hints.get(name))
                for name, value in zip(type(obj)._fields, obj)
                if not name.startswith("_")]

    if dataclasses.is_dataclass(obj):
        names = [f.name for f in dataclasses.fields(obj)]
    else:
        names = list(getattr(obj, "__dict__", {}))
        names += [name for name in _slot_names(type(obj)) if name not in names]

    result = []
    for name in names:
        if name.startswith("_"):
            continue
        try:
            value = getattr(obj, name)
        except AttributeError as e:
            if name in _slot_names(type(obj)):
                # Unset slot
                continue
            error = e
        except Exception as e:
            error = e
        else:
            result.append(RecordField(name, value, hints.get(name)))
            continue

        logger.debug("reading field %r of %s failed: %r", name, type(obj).__name__, error)
        result.append(RecordField(name, None, hints.get(name), error))
    return result


@functools.lru_cache(maxsize=256)
def declared_types(cls: type) -> dict[str, Any]:
    """
    Resolved field annotations of a class, including inherited ones.

    Falls back to the raw, possibly unresolved `__annotations__` when forward
    references cannot be evaluated.
    """
    try:
        return typing.get_type_hints(cls)
    except Exception as e:
        logger.debug("type hints of %s are unresolvable: %s", cls.__qualname__, e)

    raw = {}
    for klass in reversed(cls.__mro__):
        try:
            raw.update(inspect.get_annotations(klass))
        except Exception as e:
            logger.debug("annotations of %s are unreadable: %s", klass.__qualname__, e)
    return raw


def declared_exactly(annotation: Any, value: Any) -> bool:
    """
    Check whether annotation names exactly the runtime class of value.

    `Optional[X]` and `X | None` are unwrapped to `X`. Any other union, `Any`, `object`,
    a base class of value, or a string annotation never match.

    Examples:
        >>> from typing import Optional
        >>> class P: ...
        >>> declared_exactly(P, P())
        True
        >>> declared_exactly(Optional[P], P())
        True
        >>> declared_exactly(object, P())
        False
    """
    if annotation is None:
        return False

    if typing.get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) != 1:
            return False
        annotation = args[0]

    return isinstance(annotation, type) and annotation is type(value)


# Private Methods ------------------------------------------------------------------------------------------------------

@functools.lru_cache(maxsize=256)
def _slot_names(cls: type) -> tuple[str, ...]:
    names = []
    for klass in reversed(cls.__mro__):
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__") and name not in names:
                names.append(name)
    return tuple(names)


def _is_stdlib_class(cls: type) -> bool:
    """Class defined in the builtins or a standard library module, which renders via repr()."""
    module = getattr(cls, "__module__", None) or ""
    return module == "builtins" or module.partition(".")[0] in sys.stdlib_module_names
