"""Convert a batch of expressions and stream the results to a file."""
from pathlib import Path
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, Field

from shunting_yard.common.converter import ShuntingYard
from shunting_yard.common.formatter import join_rpn
from shunting_yard.common.logger import logger
from shunting_yard.common.models import ConversionResult


def build_output_path(input_path: Path) -> Path:
    """
    Construct the results file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/expressions.7z
    output: resources/expressions_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffixes = "".join(input_path.suffixes)
    suffix_safe = suffixes.replace(".", "_")
    stem = input_path.name[: len(input_path.name) - len(suffixes)]
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def format_result(result: ConversionResult) -> str:
    """Render a result as ``expr = rpn`` or ``expr -> ERROR: message``."""
    if result.ok:
        return f"{result.expression} = {join_rpn(result.rpn)}"
    return f"{result.expression} -> ERROR: {result.error}"


class BatchConverter(BaseModel):
    """
    Convert expressions one after the other, writing each result as soon as it is known.

    Lifecycle:
        - Opens the output file once per run
        - Writes and flushes one line per expression
        - A failing expression is reported in the file and does not stop the batch
    """

    # The converter keeps its last RPN, so it is not a pydantic type
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    converter: ShuntingYard = Field(..., description="Converter used for every expression")
    output_file: Path = Field(..., description="Path where results are written")

    def run(self, expressions: Iterable[str]) -> List[ConversionResult]:
        """
        Convert all expressions and write the results file.

        :param expressions: Infix expressions

        :return: One result per expression, in input order
        :rtype: List[ConversionResult]
        """
        results: List[ConversionResult] = []
        logger.info("🏁 Converting expressions into %s", self.output_file)

        with self.output_file.open("w", encoding="utf-8") as f_out:
            for line_number, expression in enumerate(expressions, start=1):
                result = self.converter.try_convert(expression)
                if result.ok:
                    logger.debug("✅ Line %d: %s", line_number, join_rpn(result.rpn))
                else:
                    logger.error("❌ Line %d: %s", line_number, result.error)
                f_out.write(format_result(result) + "\n")
                f_out.flush()
                results.append(result)

        failed = sum(1 for r in results if not r.ok)
        logger.info("Converted %d expressions, %d failed", len(results), failed)
        return results
