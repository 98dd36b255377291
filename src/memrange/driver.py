"""
Relation Driver

Text in, report out: parses two locations, relates them and optionally
cross-checks the answer by brute force.
"""

from typing import List, Optional
import logging

from .analysis.footprint import verify_relation
from .analysis.intersection import IntersectionResult, Tracer, intersect
from .frontend.parser import Parser
from .shared.errors import ErrorReporter, FootprintError, LocationSyntaxError
from .shared.location import MemoryLocationRange
from .utils.config import DEFAULT_COMPLEMENT_THRESHOLD

logger = logging.getLogger(__name__)


class RelationReport:
    """Outcome of one driver run"""
    def __init__(
        self,
        lhs: Optional[MemoryLocationRange] = None,
        rhs: Optional[MemoryLocationRange] = None,
        result: Optional[IntersectionResult] = None,
        left: Optional[List[MemoryLocationRange]] = None,
        right: Optional[List[MemoryLocationRange]] = None,
        problems: Optional[List[str]] = None,
        reporter: Optional[ErrorReporter] = None,
    ):
        self.lhs = lhs
        self.rhs = rhs
        self.result = result
        self.left = left if left is not None else []
        self.right = right if right is not None else []
        self.problems = problems if problems is not None else []
        self.reporter = reporter if reporter is not None else ErrorReporter({})

    @property
    def success(self) -> bool:
        return self.result is not None and not self.reporter.has_errors()

    def has_errors(self) -> bool:
        return self.reporter.has_errors()

    def format(self) -> str:
        """Human readable summary"""
        if self.result is None:
            return "no result"
        lines = [f"relation: {self.result.relation.value}"]
        if self.result.is_exact():
            lines.append(f"intersection: {self.result.location}")
            lines.extend(f"left: {loc}" for loc in self.left)
            lines.extend(f"right: {loc}" for loc in self.right)
        lines.extend(f"problem: {p}" for p in self.problems)
        return "\n".join(lines)


class RelationDriver:
    """
    Orchestrates parse -> intersect -> verify.

    Stateless apart from its configuration; safe to reuse across runs.
    """

    def __init__(self, threshold: int = DEFAULT_COMPLEMENT_THRESHOLD,
                 parser: Optional[Parser] = None):
        self.threshold = threshold
        self.parser = parser if parser is not None else Parser()

    def run(self, lhs_text: str, rhs_text: str, verify: bool = False,
            tracer: Optional[Tracer] = None) -> RelationReport:
        reporter = ErrorReporter({})
        report = RelationReport(reporter=reporter)
        report.lhs = self._parse(lhs_text, "<lhs>", reporter)
        report.rhs = self._parse(rhs_text, "<rhs>", reporter)
        if report.lhs is None or report.rhs is None:
            return report

        left: List[MemoryLocationRange] = []
        right: List[MemoryLocationRange] = []
        report.result = intersect(report.lhs, report.rhs, left, right,
                                  threshold=self.threshold, tracer=tracer)
        report.left, report.right = left, right
        logger.debug(f"{report.lhs} vs {report.rhs}: {report.result}")

        if verify:
            try:
                report.problems = verify_relation(report.lhs, report.rhs, report.result,
                                                  left, right)
            except FootprintError as e:
                report.problems = [f"cannot verify: {e.message}"]
        return report

    def _parse(self, text: str, name: str,
               reporter: ErrorReporter) -> Optional[MemoryLocationRange]:
        try:
            return self.parser.parse(text, name)
        except LocationSyntaxError as e:
            reporter.report_exception(e)
            return None
