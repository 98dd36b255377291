"""
Parser

Reads location notation (see grammar.lark) into MemoryLocationRange values.
"""

from functools import lru_cache
from pathlib import Path
import logging

from lark import Lark
from lark.exceptions import UnexpectedInput, UnexpectedEOF, VisitError

from ..shared.errors import LocationSyntaxError, MemrangeSourceError
from ..shared.location import MemoryLocationRange
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE, DEFAULT_SOURCE_NAME, SYNTAX_ERROR_CODE
from .transformer import LocationTransformer

logger = logging.getLogger(__name__)


class Parser:
    """
    LALR parser for location notation.

    - Takes source text, returns one location
    - Preserves source positions for diagnostics
    - Uses Lark with its native grammar cache
    """

    def __init__(self, cache_file: str = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            str(grammar_path),
            start='start',
            parser='lalr',
            cache=cache_file,
            propagate_positions=True,
            maybe_placeholders=False,
        )

    def parse(self, source: str, source_name: str = DEFAULT_SOURCE_NAME) -> MemoryLocationRange:
        """
        Parse one location.

        Raises: LocationSyntaxError on malformed text or invalid dimensions
        """
        try:
            tree = self.parser.parse(source)
            return LocationTransformer(source_name, source).transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, MemrangeSourceError):
                raise e.orig_exc from None
            raise
        except UnexpectedInput as e:
            location = _error_location(e, source, source_name)
            logger.debug(f"Parse error in {source_name}: {e}")
            raise LocationSyntaxError(
                _describe(e),
                location=location,
                error_code=SYNTAX_ERROR_CODE,
                source_code=source,
                help="expected `NAME bytes [LOW, HIGH)`, `NAME dims(...) [elem N]` or `NAME whole`",
            ) from None


def _at_end(e: UnexpectedInput) -> bool:
    # LALR reports a truncated location as an unexpected $END token
    if isinstance(e, UnexpectedEOF):
        return True
    token = getattr(e, "token", None)
    return token is not None and token.type == "$END"


def _error_location(e: UnexpectedInput, source: str, source_name: str) -> SourceLocation:
    line = getattr(e, "line", -1)
    column = getattr(e, "column", -1)
    if _at_end(e) or line is None or line < 1:
        lines = source.split("\n")
        line = len(lines)
        column = len(lines[-1]) + 1
    return SourceLocation(source_name, line, column)


def _describe(e: UnexpectedInput) -> str:
    if _at_end(e):
        return "unexpected end of location"
    token = getattr(e, "token", None)
    if token is not None:
        return f"unexpected `{token}`"
    char = getattr(e, "char", None)
    if char is not None:
        return f"unexpected character `{char}`"
    return "malformed location"


@lru_cache(maxsize=1)
def _shared_parser() -> Parser:
    return Parser()


def parse_location(source: str, source_name: str = DEFAULT_SOURCE_NAME) -> MemoryLocationRange:
    """Parse with a lazily created module-wide Parser."""
    return _shared_parser().parse(source, source_name)
