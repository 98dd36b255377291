"""
Location Serialization to S-Expressions
=======================================

Canonical S-expression form of locations and relation results, for golden
tests, logs and exchange with the surrounding analysis:

    (location "A" :kind collapsed :lower nil :upper 4
      (dims (dim 0 2 5 10) (dim 3 1 4 8)))

    (relation exact (location ...) (left (location ...) ...) (right ...))

Uses structured sexpr (nested lists + sexpdata.Symbol), then pretty-prints
for readable output.
"""

from typing import Any, List, Optional, Sequence

import sexpdata

from ..analysis.intersection import IntersectionResult
from ..shared.errors import LocationSyntaxError
from ..shared.location import Dimension, LocKind, MemoryLocationRange
from ..utils.config import MALFORMED_SEXPR_CODE, SEXPR_MAX_LINE


def _sym(s: str) -> sexpdata.Symbol:
    return sexpdata.Symbol(s)


def _pretty_dumps(sexpr: Any, indent: int = 0, indent_str: str = "  ",
                  max_line: int = SEXPR_MAX_LINE) -> str:
    """
    Pretty-print structured sexpr. Keeps short forms on one line; breaks only when needed.
    """
    if sexpr is None:
        return "nil"
    if isinstance(sexpr, bool):
        return "true" if sexpr else "false"
    if isinstance(sexpr, int):
        return str(sexpr)
    # Check Symbol before str (sexpdata.Symbol subclasses str)
    if isinstance(sexpr, sexpdata.Symbol):
        return sexpr.value()
    if isinstance(sexpr, str):
        escaped = sexpr.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(sexpr, list):
        if not sexpr:
            return "()"
        parts = [_pretty_dumps(e, indent + 1, indent_str, max_line) for e in sexpr]
        one_line = "(" + " ".join(parts) + ")"
        if len(one_line) + len(indent_str) * indent <= max_line and "\n" not in one_line:
            return one_line
        # Keep the head and its atoms (keyword arguments included) on the opening line
        head = [parts[0]]
        rest = parts[1:]
        while rest and not rest[0].startswith("("):
            head.append(rest.pop(0))
        next_prefix = indent_str * (indent + 1)
        body = "".join("\n" + next_prefix + p for p in rest)
        return "(" + " ".join(head) + body + ")"
    return str(sexpr)


class LocationSerializer:
    """Builds structured sexpr for locations and relation results."""

    def location(self, loc: MemoryLocationRange) -> list:
        sexpr = [
            _sym("location"),
            self._ptr(loc.ptr),
            _sym(":kind"), _sym(loc.kind.value),
            _sym(":lower"), self._bound(loc.lower_bound),
            _sym(":upper"), self._bound(loc.upper_bound),
        ]
        if loc.dims:
            sexpr.append([_sym("dims")] + [self.dimension(d) for d in loc.dims])
        return sexpr

    def dimension(self, dim: Dimension) -> list:
        return [_sym("dim"), dim.start, dim.step, dim.trip_count, dim.dim_size]

    def result(self, result: IntersectionResult,
               lc: Optional[Sequence[MemoryLocationRange]] = None,
               rc: Optional[Sequence[MemoryLocationRange]] = None) -> list:
        sexpr = [_sym("relation"), _sym(result.relation.value)]
        if result.location is not None and result.is_exact():
            sexpr.append(self.location(result.location))
        if lc is not None:
            sexpr.append([_sym("left")] + [self.location(l) for l in lc])
        if rc is not None:
            sexpr.append([_sym("right")] + [self.location(r) for r in rc])
        return sexpr

    def _ptr(self, ptr: Any) -> Any:
        if ptr is None:
            return _sym("nil")
        return ptr if isinstance(ptr, (int, str)) else str(ptr)

    def _bound(self, value: Optional[int]) -> Any:
        return _sym("nil") if value is None else value


def serialize_location(loc: MemoryLocationRange, pretty: bool = True) -> str:
    """
    Serialize a location to an S-expression string.

    Args:
        loc: Location to serialize
        pretty: Use pretty-printed format (default True). Set False for compact single-line.
    """
    sexpr = LocationSerializer().location(loc)
    return _pretty_dumps(sexpr) if pretty else sexpdata.dumps(sexpr)


def serialize_result(result: IntersectionResult,
                     lc: Optional[Sequence[MemoryLocationRange]] = None,
                     rc: Optional[Sequence[MemoryLocationRange]] = None,
                     pretty: bool = True) -> str:
    """Serialize a relation result together with the leftover fragments."""
    sexpr = LocationSerializer().result(result, lc, rc)
    return _pretty_dumps(sexpr) if pretty else sexpdata.dumps(sexpr)


class LocationDeserializer:
    """Structured sexpr (as read by sexpdata.loads) back to locations."""

    def location(self, sexpr: Any) -> MemoryLocationRange:
        if not isinstance(sexpr, list) or len(sexpr) < 2 or self._tag(sexpr[0]) != "location":
            raise self._error(f"expected (location ...), got {sexpdata.dumps(sexpr)}")
        ptr = self._value(sexpr[1])
        options = {}
        dims: List[Dimension] = []
        items = sexpr[2:]
        i = 0
        while i < len(items):
            item = items[i]
            tag = self._tag(item)
            if tag is not None and tag.startswith(":"):
                if i + 1 >= len(items):
                    raise self._error(f"missing value for {tag}")
                options[tag[1:]] = items[i + 1]
                i += 2
                continue
            if isinstance(item, list) and item and self._tag(item[0]) == "dims":
                dims = [self.dimension(d) for d in item[1:]]
                i += 1
                continue
            raise self._error(f"unexpected item {sexpdata.dumps(item)} in location")
        kind_name = self._tag(options.get("kind", _sym(LocKind.DEFAULT.value)))
        try:
            kind = LocKind(kind_name)
        except ValueError:
            raise self._error(f"unknown location kind {kind_name!r}") from None
        return MemoryLocationRange(
            ptr=ptr,
            kind=kind,
            lower_bound=self._int_or_none(options.get("lower")),
            upper_bound=self._int_or_none(options.get("upper")),
            dims=tuple(dims),
        )

    def dimension(self, sexpr: Any) -> Dimension:
        if (not isinstance(sexpr, list) or len(sexpr) != 5 or self._tag(sexpr[0]) != "dim"
                or not all(isinstance(v, int) for v in sexpr[1:])):
            raise self._error("expected (dim START STEP COUNT SIZE)")
        return Dimension(*sexpr[1:])

    def _tag(self, item: Any) -> Optional[str]:
        if isinstance(item, sexpdata.Symbol):
            return item.value()
        return None

    def _value(self, item: Any) -> Any:
        if item == [] or self._tag(item) == "nil":
            return None
        if isinstance(item, sexpdata.Symbol):
            return item.value()
        return item

    def _int_or_none(self, item: Any) -> Optional[int]:
        value = self._value(item)
        if value is not None and not isinstance(value, int):
            raise self._error(f"expected an integer bound, got {value!r}")
        return value

    def _error(self, message: str) -> LocationSyntaxError:
        return LocationSyntaxError(f"malformed location S-expression: {message}",
                                   error_code=MALFORMED_SEXPR_CODE)


def deserialize_location(sexpr_str: str) -> MemoryLocationRange:
    """
    Deserialize S-expression string to a location.

    Raises: LocationSyntaxError if the text is not a location S-expression
    """
    try:
        parsed = sexpdata.loads(sexpr_str)
    except Exception as e:  # sexpdata reports syntax errors with several exception types
        raise LocationSyntaxError(f"malformed location S-expression: {e}",
                                  error_code=MALFORMED_SEXPR_CODE) from None
    return LocationDeserializer().location(parsed)
