"""
Command-line entrypoint.

This script:
- Converts the expressions given as arguments and prints their RPN
- Converts every expression of a file (or archive) into a results file

Both use the reference grammar (strings, V<n> variables, functions, numbers
and arithmetic/comparison operators).
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import BaseModel, FilePath, ValidationError, model_validator

from shunting_yard.batch.reader import ExpressionReader
from shunting_yard.batch.runner import BatchConverter, build_output_path
from shunting_yard.common.converter import ShuntingYard
from shunting_yard.common.formatter import dump_rpn
from shunting_yard.common.grammar import build_converter
from shunting_yard.common.logger import configure_logging, logger


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    expressions : List[str]
        Infix expressions to convert and print.
    file_path : Optional[FilePath]
        Path to a file containing one expression per line.
    verbose : bool
        Trace every stack and queue move.
    """

    expressions: List[str] = []
    file_path: Optional[FilePath] = None
    verbose: bool = False

    @model_validator(mode="after")
    def needs_input(self) -> "CliArgs":
        if not self.expressions and self.file_path is None:
            raise ValueError("Give at least one expression or --file")
        return self


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        description="Convert infix expressions into Reverse Polish Notation"
    )
    parser.add_argument("expressions", nargs="*", help="Infix expressions to convert")
    parser.add_argument("-f", "--file", dest="file_path", help="File or archive with one expression per line")
    parser.add_argument("-v", "--verbose", action="store_true", help="Trace the conversion steps")

    args = parser.parse_args(argv)

    try:
        return CliArgs(expressions=args.expressions, file_path=args.file_path, verbose=args.verbose)
    except ValidationError as exc:
        parser.error(str(exc))


def print_expressions(converter: ShuntingYard, expressions: List[str]) -> bool:
    """
    Print the RPN of each expression on stdout.

    :return: True if every expression was converted
    """
    ok = True
    for expression in expressions:
        result = converter.try_convert(expression)
        if result.ok:
            print(f"{expression}:\n\n{dump_rpn(result.rpn)}\n")
        else:
            logger.error("%s", result.error)
            ok = False
    return ok


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function, returns the process exit status.
    """
    cli_args = parse_args(argv)
    configure_logging(logging.DEBUG if cli_args.verbose else logging.INFO)

    converter = build_converter(trace=logger.debug if cli_args.verbose else None)
    ok = print_expressions(converter, cli_args.expressions)

    if cli_args.file_path is not None:
        input_path = Path(cli_args.file_path)
        try:
            expressions = ExpressionReader().read(input_path)
        except ValueError as exc:
            logger.error("%s", exc)
            return 1
        batch = BatchConverter(converter=converter, output_file=build_output_path(input_path))
        results = batch.run(expressions)
        ok = ok and all(r.ok for r in results)

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
