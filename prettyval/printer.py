"""
Pretty-printer for arbitrary Python values.

Renders any value as readable, optionally colorized text that fits a maximum line width:
compound values go single-line when they fit and fall back to one item per line otherwise,
reference cycles are cut off and tagged, long sequences and strings are truncated, and
timestamps, UUIDs and JSON strings get dedicated renderings.

Examples:
    >>> from prettyval.printer import Printer, pformat
    >>> print(pformat({"name": "Alice", "age": 30, "tags": ["user", "premium"]},
    ...               Printer(color_mode="never")))
    {age: 30, name: "Alice", tags: ["user", "premium"]}
"""

# Standard library -----------------------------------------------------------------------------------------------------
import asyncio
import collections.abc as abc
import json
import logging
import multiprocessing.queues
import queue
import sys
import uuid
import weakref
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum, unique
from typing import Any, Callable, TextIO

# Local ----------------------------------------------------------------------------------------------------------------
from .identity import back_reference, format_uuid_bytes, format_uuid_string, identity_tag
from .identity import is_uuid_bytes, is_uuid_string
from .layout import CompoundFormatter, apply_margin, indent, truncate_center
from .records import declared_exactly, is_namedtuple, is_record, record_fields
from .sentinels import UNSET, UnsetType, ifnotunset
from .styles import ColorMode, Styles, colorize
from .terminal import stdout_is_terminal
from .timefmt import TimeFormatter, delta, is_zero_time
from .utils import class_name, safe_repr

logger = logging.getLogger(__name__)

# Constants ------------------------------------------------------------------------------------------------------------

NULL_TOKEN = "nil"
STREAM_TOKEN = "<io.ReadCloser>"
JSON_MARKER = "JSON"

# Absolute time distance above which the wall-clock time is appended
CLOCK_SUFFIX_AFTER = timedelta(minutes=30)

_QUEUE_TYPES = (queue.Queue, queue.SimpleQueue, asyncio.Queue,
                multiprocessing.queues.Queue, multiprocessing.queues.SimpleQueue)


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Kind(str, Enum):
    """Rendering category of a value, see classify()."""
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BYTES = "bytes"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RECORD = "record"
    REFERENCE = "reference"
    CHANNEL = "channel"
    TIME = "time"
    STREAM = "stream"
    UUID = "uuid"
    OTHER = "other"


@dataclass(frozen=True)
class Printer:
    """
    Immutable pretty-printer configuration.

    Every with_*() method returns a new Printer, so a shared instance is never altered.

    Attributes:
        max_width: Maximum line width before a compound value goes multi-line.
        color_mode: ColorMode or its value "auto", "always", "never".
        max_slice_length: Sequences longer than this are truncated, 0 means unlimited.
        max_string_length: Strings longer than this are center-truncated, 0 means unlimited.
        max_keys_inline: Mappings and records with more entries go multi-line, 0 means unlimited.
        margin: Blank padding around the output as (top, right, bottom, left).
        styles: Semantic style table.
        time_formatter: Relative time configuration, including the reference instant.
        is_terminal: Capability query consulted by ColorMode.AUTO.

    Examples:
        >>> p = Printer(color_mode="never").with_max_width(8)
        >>> print(p.pformat([1, 2, 3, 4]))
        [
          1,
          2,
          3,
          4
        ]
    """
    max_width: int = 100
    color_mode: ColorMode | str = ColorMode.AUTO
    max_slice_length: int = 20
    max_string_length: int = 0
    max_keys_inline: int = 0
    margin: tuple[int, int, int, int] = (0, 0, 0, 0)
    styles: Styles = field(default_factory=Styles)
    time_formatter: TimeFormatter = field(default_factory=TimeFormatter)
    is_terminal: Callable[[], bool] = field(default=stdout_is_terminal, repr=False, compare=False)

    def __post_init__(self):
        """Validate and normalize fields"""
        for name in ("max_width", "max_slice_length", "max_string_length", "max_keys_inline"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be int, but got {class_name(value)}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, but got {value}")
        if self.max_width == 0:
            raise ValueError("max_width must be positive, but got 0")

        try:
            object.__setattr__(self, "color_mode", ColorMode(self.color_mode))
        except ValueError:
            raise ValueError(f"color_mode must be one of 'auto', 'always', 'never', "
                             f"but got {self.color_mode!r}") from None

        margin = tuple(self.margin)
        if len(margin) != 4:
            raise ValueError(f"margin must hold 4 values (top, right, bottom, left), but got {len(margin)}")
        for value in margin:
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"margin values must be non-negative int, but got {value!r}")
        object.__setattr__(self, "margin", margin)

        if not isinstance(self.styles, Styles):
            raise TypeError(f"styles must be Styles, but got {class_name(self.styles)}")
        if not isinstance(self.time_formatter, TimeFormatter):
            raise TypeError(f"time_formatter must be TimeFormatter, but got {class_name(self.time_formatter)}")
        if not callable(self.is_terminal):
            raise TypeError(f"is_terminal must be callable, but got {class_name(self.is_terminal)}")

    def merge(self,
              max_width: int | UnsetType = UNSET,
              color_mode: ColorMode | str | UnsetType = UNSET,
              max_slice_length: int | UnsetType = UNSET,
              max_string_length: int | UnsetType = UNSET,
              max_keys_inline: int | UnsetType = UNSET,
              margin: tuple[int, int, int, int] | UnsetType = UNSET,
              styles: Styles | UnsetType = UNSET,
              time_formatter: TimeFormatter | UnsetType = UNSET,
              is_terminal: Callable[[], bool] | UnsetType = UNSET,
              ) -> "Printer":
        """
        Create a new Printer with merged configuration options.

        Parameters not provided (UNSET) are inherited from the current instance.

        Returns:
            New Printer instance with merged configuration.
        """
        return Printer(
            max_width=ifnotunset(max_width, default=self.max_width),
            color_mode=ifnotunset(color_mode, default=self.color_mode),
            max_slice_length=ifnotunset(max_slice_length, default=self.max_slice_length),
            max_string_length=ifnotunset(max_string_length, default=self.max_string_length),
            max_keys_inline=ifnotunset(max_keys_inline, default=self.max_keys_inline),
            margin=ifnotunset(margin, default=self.margin),
            styles=ifnotunset(styles, default=self.styles),
            time_formatter=ifnotunset(time_formatter, default=self.time_formatter),
            is_terminal=ifnotunset(is_terminal, default=self.is_terminal),
        )

    def with_max_width(self, width: int) -> "Printer":
        return self.merge(max_width=width)

    def with_color_mode(self, mode: ColorMode | str) -> "Printer":
        return self.merge(color_mode=mode)

    def with_max_slice_length(self, max_len: int) -> "Printer":
        """Truncate sequences longer than max_len, 0 disables truncation."""
        return self.merge(max_slice_length=max_len)

    def with_max_string_length(self, max_len: int) -> "Printer":
        """Center-truncate strings longer than max_len, 0 disables truncation."""
        return self.merge(max_string_length=max_len)

    def with_max_keys_inline(self, max_keys: int) -> "Printer":
        return self.merge(max_keys_inline=max_keys)

    def with_margin(self, *margin: int) -> "Printer":
        """
        Set the margin with 1 to 4 values, CSS-style.

        One value applies to all sides, two are (vertical, horizontal), three are
        (top, horizontal, bottom), four are (top, right, bottom, left).

        Raises:
            ValueError: If not given 1 to 4 values.
        """
        if len(margin) == 1:
            top = right = bottom = left = margin[0]
        elif len(margin) == 2:
            top, right = margin
            bottom, left = top, right
        elif len(margin) == 3:
            top, right, bottom = margin
            left = right
        elif len(margin) == 4:
            top, right, bottom, left = margin
        else:
            raise ValueError(f"margin takes 1 to 4 values, but got {len(margin)}")
        return self.merge(margin=(top, right, bottom, left))

    def with_styles(self, styles: Styles) -> "Printer":
        return self.merge(styles=styles)

    def with_time_formatter(self, time_formatter: TimeFormatter) -> "Printer":
        return self.merge(time_formatter=time_formatter)

    def with_now(self, now: datetime | None) -> "Printer":
        """Set the reference instant used for relative times."""
        return self.merge(time_formatter=self.time_formatter.with_now(now))

    def use_colors(self) -> bool:
        """Resolve the color mode, consulting is_terminal() for AUTO."""
        if self.color_mode is ColorMode.ALWAYS:
            return True
        if self.color_mode is ColorMode.NEVER:
            return False
        return bool(self.is_terminal())

    def pformat(self, value: Any) -> str:
        """
        Format value as a pretty-printed string.

        Raises:
            RuntimeError: If a channel-like handle reports neither direction.
        """
        colors = self.use_colors()
        if value is None:
            return colorize(NULL_TOKEN, self.styles.null, colors)

        result = _Session(self, colors).format_value(value, 0)
        if any(self.margin):
            result = apply_margin(result, self.margin)
        return result


class _Session:
    """
    State of a single pformat() call.

    visiting holds the ids of the containers and records on the current recursion path,
    cycled maps the ids found on a back-edge to their objects, which keeps them alive
    so their ids stay unique until the call returns.
    """

    def __init__(self, printer: Printer, colors: bool):
        self.printer = printer
        self.styles = printer.styles
        self.colors = colors
        tf = printer.time_formatter
        self.time_formatter = tf if tf.now is not None else tf.with_now(datetime.now())
        self.visiting: set[int] = set()
        self.cycled: dict[int, Any] = {}

    def format_value(self, value: Any, depth: int, include_type_name: bool = True) -> str:
        kind = classify(value)
        identity = _identity(value, kind)

        if identity is not None:
            if identity in self.visiting:
                self.cycled[identity] = value
                return back_reference(identity, self.styles, self.colors)
            self.visiting.add(identity)

        try:
            result = self._dispatch(value, kind, depth, include_type_name)
        finally:
            if identity is not None:
                self.visiting.discard(identity)

        if identity is not None and identity in self.cycled:
            result += identity_tag(identity, self.styles, self.colors)
        return result

    def _dispatch(self, value: Any, kind: Kind, depth: int, include_type_name: bool) -> str:
        styles = self.styles
        match kind:
            case Kind.STREAM:
                return self._colorize(STREAM_TOKEN, styles.special_type)
            case Kind.TIME:
                return self._format_time(value)
            case Kind.UUID:
                return format_uuid_bytes(value.bytes, styles, self.colors)
            case Kind.NULL:
                return self._colorize(NULL_TOKEN, styles.null)
            case Kind.BOOL:
                return self._colorize("true" if value else "false", styles.boolean)
            case Kind.INT:
                return self._colorize(int.__repr__(value), styles.number)
            case Kind.FLOAT:
                return self._colorize(float.__repr__(value), styles.float)
            case Kind.STRING:
                return self._format_string(value, depth)
            case Kind.BYTES:
                if is_uuid_bytes(value):
                    return format_uuid_bytes(value, styles, self.colors)
                return self._format_sequence(value, "[", "]", depth)
            case Kind.MAPPING:
                return self._format_mapping(value, depth)
            case Kind.REFERENCE:
                target = value()
                if target is None:
                    return self._colorize(NULL_TOKEN, styles.null)
                return self.format_value(target, depth, include_type_name)
            case Kind.CHANNEL:
                return _format_channel(value)
            case Kind.SEQUENCE:
                if isinstance(value, abc.Set):
                    items = sorted(value, key=self._sort_key)
                    return self._format_sequence(items, "{", "}", depth)
                if isinstance(value, tuple):
                    return self._format_sequence(value, "(", ")", depth)
                return self._format_sequence(value, "[", "]", depth)
            case Kind.RECORD:
                return self._format_record(value, depth, include_type_name)
            case _:
                return self._format_other(value, depth)

    def _colorize(self, text: str, style) -> str:
        return colorize(text, style, self.colors)

    # Scalars

    def _format_string(self, value: str, depth: int) -> str:
        if is_uuid_string(value):
            return format_uuid_string(value, self.styles, self.colors)

        parsed, ok = _parse_json(value)
        if ok:
            return self._colorize(JSON_MARKER, self.styles.special_type) + " " + self.format_value(parsed, depth)

        truncated = truncate_center(value, self.printer.max_string_length)
        return self._colorize(f'"{truncated}"', self.styles.string)

    def _format_time(self, value: datetime) -> str:
        tf = self.time_formatter
        text = tf.format(value)
        if is_zero_time(value):
            return self._colorize(text, self.styles.special_type)

        if abs(delta(tf.now, value)) > CLOCK_SUFFIX_AFTER:
            clock = value.strftime("%I:%M%p").lstrip("0")
            return f"{self._colorize(text, self.styles.time)} {self._colorize(clock, self.styles.comment)}"
        return self._colorize(text, self.styles.time)

    # Compounds

    def _format_sequence(self, items: abc.Sequence, open_brace: str, close_brace: str, depth: int) -> str:
        length = len(items)
        max_len = self.printer.max_slice_length
        if 0 < max_len < length:
            return self._format_truncated(items, open_brace, close_brace, depth)

        cf = CompoundFormatter(open_brace, close_brace, depth=depth, max_width=self.printer.max_width)
        for item in items:
            cf.add_item(self.format_value(item, 0), self.format_value(item, depth + 1))
        return cf.format()

    def _format_truncated(self, items: abc.Sequence, open_brace: str, close_brace: str, depth: int) -> str:
        """Leading and trailing elements around an omission note, always multi-line."""
        length = len(items)
        max_len = self.printer.max_slice_length
        leading = (max_len + 1) // 2
        trailing = max_len // 2

        pad = indent(depth + 1)
        parts = [pad + self.format_value(items[i], depth + 1) for i in range(leading)]
        omitted = length - leading - trailing
        if omitted > 0:
            parts.append(pad + self._colorize(f"... {omitted} more elements ...", self.styles.comment))
        parts += [pad + self.format_value(items[i], depth + 1) for i in range(length - trailing, length)]
        parts.append(pad + self._colorize(f"# len() = {length}", self.styles.comment))

        return f"{open_brace}\n" + ",\n".join(parts) + f"\n{indent(depth)}{close_brace}"

    def _format_mapping(self, value: abc.Mapping, depth: int) -> str:
        entries = sorted(value.items(), key=lambda kv: self._sort_key(kv[0]))

        cf = CompoundFormatter("{", "}", depth=depth,
                               max_keys_inline=self.printer.max_keys_inline, max_width=self.printer.max_width)
        for key, item in entries:
            key_text = self._format_key(key)
            # A record under a key spelling its class name is rendered without the name
            include = not (isinstance(key, str) and classify(item) is Kind.RECORD and key == type(item).__name__)
            single = self.format_value(item, 0, include)
            multi = self.format_value(item, depth + 1, include)
            cf.add_item(f"{key_text}: {single}", f"{key_text}: {multi}")
        return cf.format()

    def _format_key(self, key: Any) -> str:
        if isinstance(key, str):
            return self._colorize(truncate_center(key, self.printer.max_string_length), self.styles.field)
        if classify(key) is Kind.RECORD:
            return self.format_value(key, 0, include_type_name=False)
        return self.format_value(key, 0)

    def _sort_key(self, key: Any) -> str:
        if isinstance(key, str):
            return key
        if isinstance(key, bool):
            return "true" if key else "false"
        if isinstance(key, int):
            return int.__repr__(key)
        if isinstance(key, float):
            return float.__repr__(key)
        return self.format_value(key, 0)

    def _format_record(self, value: Any, depth: int, include_type_name: bool) -> str:
        type_name = type(value).__name__ if include_type_name else ""
        cf = CompoundFormatter("{", "}", type_name, depth,
                               max_keys_inline=self.printer.max_keys_inline, max_width=self.printer.max_width)

        for f in record_fields(value):
            name = self._colorize(f.name, self.styles.field)
            if f.error is not None:
                text = self._colorize(f"<error: {type(f.error).__name__}>", self.styles.error)
                cf.add_item(f"{name}: {text}", f"{name}: {text}")
                continue

            include = not (classify(f.value) is Kind.RECORD and declared_exactly(f.annotation, f.value))
            single = self.format_value(f.value, 0, include)
            multi = self.format_value(f.value, depth + 1, include)
            cf.add_item(f"{name}: {single}", f"{name}: {multi}")
        return cf.format()

    # Fallback

    def _format_other(self, value: Any, depth: int) -> str:
        try:
            text = json.dumps(value, indent=2)
        except (TypeError, ValueError) as e:
            logger.debug("no JSON rendering for %s, using repr(): %s", class_name(value), e)
            text, ok = safe_repr(value)
            if not ok:
                logger.debug("repr() of %s failed", class_name(value))
                return self._colorize(text, self.styles.error)
            return text
        return text.replace("\n", "\n" + indent(depth))


# Methods --------------------------------------------------------------------------------------------------------------

def classify(value: Any) -> Kind:
    """
    Rendering category of value.

    Examples:
        >>> classify([1, 2]), classify({"a": 1}), classify(None)
        (<Kind.SEQUENCE: 'sequence'>, <Kind.MAPPING: 'mapping'>, <Kind.NULL: 'null'>)
    """
    if _is_stream(value):
        return Kind.STREAM
    if isinstance(value, datetime):
        return Kind.TIME
    if isinstance(value, uuid.UUID):
        return Kind.UUID
    if value is None:
        return Kind.NULL
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray)):
        return Kind.BYTES
    if isinstance(value, abc.Mapping):
        return Kind.MAPPING
    if isinstance(value, weakref.ref):
        return Kind.REFERENCE
    if _is_channel(value):
        return Kind.CHANNEL
    if is_namedtuple(value):
        return Kind.RECORD
    if isinstance(value, (abc.Sequence, abc.Set)):
        return Kind.SEQUENCE
    if is_record(value):
        return Kind.RECORD
    return Kind.OTHER


def pformat(value: Any, printer: Printer | None = None) -> str:
    """Format value with printer, or with DEFAULT_PRINTER when printer is None."""
    return (printer or DEFAULT_PRINTER).pformat(value)


def pformat_width(value: Any, width: int) -> str:
    """Format value with default settings and a custom maximum line width."""
    return Printer(max_width=width).pformat(value)


def pprint(value: Any, printer: Printer | None = None, *, file: TextIO | None = None) -> None:
    """Write the pretty-printed value and a newline to file (sys.stdout by default)."""
    print(pformat(value, printer), file=file if file is not None else sys.stdout)


# Private Methods ------------------------------------------------------------------------------------------------------

def _identity(value: Any, kind: Kind) -> int | None:
    """id() of values that can take part in a reference cycle, None otherwise."""
    if kind in (Kind.MAPPING, Kind.SEQUENCE):
        return id(value) if len(value) else None
    if kind is Kind.BYTES:
        return id(value) if isinstance(value, bytearray) and len(value) else None
    if kind is Kind.RECORD:
        return id(value)
    return None


def _is_stream(value: Any) -> bool:
    if isinstance(value, type):
        return False
    return callable(_probe(value, "read")) and callable(_probe(value, "close"))


def _is_channel(value: Any) -> bool:
    """Queue, or a connection handle with send/recv and boolean readable/writable flags."""
    if isinstance(value, _QUEUE_TYPES):
        return True
    if isinstance(value, type):
        return False
    return (callable(_probe(value, "send")) and callable(_probe(value, "recv"))
            and isinstance(_probe(value, "readable"), bool) and isinstance(_probe(value, "writable"), bool))


def _probe(value: Any, name: str) -> Any:
    """getattr() that treats any failing attribute lookup as a missing attribute."""
    try:
        return getattr(value, name, None)
    except Exception:
        return None


def _format_channel(value: Any) -> str:
    type_name = type(value).__name__
    if isinstance(value, _QUEUE_TYPES):
        return f"chan {type_name}"

    readable, writable = value.readable, value.writable
    if readable and writable:
        return f"chan {type_name}"
    if readable:
        return f"<-chan {type_name}"
    if writable:
        return f"chan<- {type_name}"
    raise RuntimeError(f"invalid channel direction: {type_name} is neither readable nor writable")


def _parse_json(text: str) -> tuple[Any, bool]:
    """Parse text as JSON when it looks like an object or an array."""
    if len(text) < 2:
        return None, False

    trimmed = text.strip()
    if not ((trimmed.startswith("{") and trimmed.endswith("}"))
            or (trimmed.startswith("[") and trimmed.endswith("]"))):
        return None, False

    try:
        return json.loads(text), True
    except ValueError:
        return None, False


# Constants ------------------------------------------------------------------------------------------------------------

DEFAULT_PRINTER = Printer()
