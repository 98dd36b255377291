"""
Location Transformer
Converts the Lark parse tree of location notation to MemoryLocationRange values
"""

from typing import Optional
import logging
import re

from lark import Transformer, v_args
from lark.lexer import Token

from ..shared.errors import LocationSyntaxError
from ..shared.location import Dimension, LocKind, MemoryLocationRange
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_SOURCE_NAME, INVALID_DIMENSION_CODE

logger = logging.getLogger(__name__)


@v_args(inline=True, meta=True)
class LocationTransformer(Transformer):
    """
    Builds locations bottom-up. One instance per parsed text, so that
    errors point at that text.
    """

    def __init__(self, current_file: str = DEFAULT_SOURCE_NAME, current_source: Optional[str] = None):
        super().__init__()
        self.current_file = current_file
        self.current_source = current_source

    def _location(self, meta) -> Optional[SourceLocation]:
        if getattr(meta, "empty", True):
            return None
        return SourceLocation(self.current_file, meta.line, meta.column,
                              meta.end_line, meta.end_column)

    # ---- names --------------------------------------------------------------

    def bare_name(self, meta, token: Token) -> str:
        return str(token)

    def quoted_name(self, meta, token: Token) -> str:
        return re.sub(r"\\(.)", r"\1", token[1:-1])

    # ---- bounds -------------------------------------------------------------

    def lower(self, meta, value: Optional[Token] = None) -> Optional[int]:
        return int(value) if value is not None else None

    def upper(self, meta, value: Optional[Token] = None) -> Optional[int]:
        return int(value) if value is not None else None

    def element_size(self, meta, value: Token) -> int:
        return int(value)

    # ---- dimensions ---------------------------------------------------------

    def strided_dim(self, meta, start: Token, step: Token, count: Token, size: Token) -> Dimension:
        return self._dimension(meta, int(start), int(step), int(count), int(size))

    def unit_dim(self, meta, start: Token, count: Token, size: Token) -> Dimension:
        return self._dimension(meta, int(start), 1, int(count), int(size))

    def _dimension(self, meta, start: int, step: int, count: int, size: int) -> Dimension:
        dim = Dimension(start=start, step=step, trip_count=count, dim_size=size)
        if dim.is_valid():
            return dim
        if step <= 0:
            reason = "step must be positive"
        elif count <= 0:
            reason = "count must be positive"
        else:
            reason = f"last index {dim.end} is not below the axis size {size}"
        logger.debug(f"[PARSER] rejected dimension {dim!r}: {reason}")
        raise LocationSyntaxError(
            f"invalid dimension: {reason}",
            location=self._location(meta),
            error_code=INVALID_DIMENSION_CODE,
            source_code=self.current_source,
            label=reason,
            help="a dimension reads `START [step STEP] count COUNT of SIZE`, SIZE 0 = unknown",
        )

    # ---- locations ----------------------------------------------------------

    def scalar_location(self, meta, name: str, lower, upper) -> MemoryLocationRange:
        return MemoryLocationRange.scalar(name, lower, upper)

    def collapsed_location(self, meta, name: str, *rest) -> MemoryLocationRange:
        dims = [r for r in rest if isinstance(r, Dimension)]
        sizes = [r for r in rest if isinstance(r, int)]
        element_size = sizes[0] if sizes else None
        return MemoryLocationRange.collapsed(name, dims, element_size)

    def whole_location(self, meta, name: str, lower=None, upper=None) -> MemoryLocationRange:
        return MemoryLocationRange(ptr=name, kind=LocKind.NON_COLLAPSABLE,
                                   lower_bound=lower, upper_bound=upper)
