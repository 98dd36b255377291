"""CLI entry point: run `memrange LHS RHS` or `python -m memrange LHS RHS`."""

import sys
import logging


def main(argv=None) -> int:
    import argparse
    from .driver import RelationDriver
    from .ir.serialization import serialize_result
    from .utils.config import (
        DEFAULT_COMPLEMENT_THRESHOLD, EXIT_OK, EXIT_PARSE_ERROR, EXIT_VERIFY_FAILED,
    )

    parser = argparse.ArgumentParser(
        prog="memrange",
        description="Relate two memory location ranges of the same object.",
        epilog='example: memrange "A dims(0 step 2 count 5 of 10)" "A dims(0 count 10 of 10)"',
    )
    parser.add_argument("lhs", help="Left location, e.g. 'A bytes [0, 40)'")
    parser.add_argument("rhs", help="Right location")
    parser.add_argument("--threshold", type=int, default=DEFAULT_COMPLEMENT_THRESHOLD,
                        help=f"Complement fragment budget per axis (default: {DEFAULT_COMPLEMENT_THRESHOLD})")
    parser.add_argument("--sexpr", action="store_true", help="Print the result as an S-expression")
    parser.add_argument("--trace", action="store_true", help="Print the equation solving trace")
    parser.add_argument("--verify", action="store_true", help="Cross-check the result by brute force")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.threshold < 0:
        parser.error("--threshold must be non-negative")
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    tracer = (lambda line: print(line, file=sys.stderr)) if args.trace else None
    report = RelationDriver(threshold=args.threshold).run(
        args.lhs, args.rhs, verify=args.verify, tracer=tracer)

    if not report.success:
        sys.stderr.write(report.reporter.format_all_errors() + "\n")
        return EXIT_PARSE_ERROR

    if args.sexpr:
        print(serialize_result(report.result, report.left, report.right))
        for problem in report.problems:
            print(f"problem: {problem}")
    else:
        print(report.format())
    return EXIT_VERIFY_FAILED if report.problems else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
