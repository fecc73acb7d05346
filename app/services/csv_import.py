"""Quiz CSV import.

Expected columns:
    Question,Option1,Option2,Option3,Option4,CorrectAnswer[,Category]

CorrectAnswer is A-D or 1-4. A first row mentioning "question" is treated as
a header.
"""

import csv
import io
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

MIN_COLUMNS = 6

_ANSWER_INDEX = {
    "a": 0, "1": 0,
    "b": 1, "2": 1,
    "c": 2, "3": 2,
    "d": 3, "4": 3,
}


@dataclass
class CSVParseResult:
    questions: list[dict] = field(default_factory=list)
    skipped_lines: list[int] = field(default_factory=list)


def parse_correct_answer(value: str) -> int:
    # Unrecognised values fall back to the first option
    return _ANSWER_INDEX.get(value.strip().lower(), 0)


def _clean(cell: str) -> str:
    cell = cell.strip()
    if len(cell) >= 2 and cell.startswith('"') and cell.endswith('"'):
        cell = cell[1:-1].strip()
    return cell


def parse_quiz_csv(text: str, default_category: str = "General") -> CSVParseResult:
    """Parse CSV text into quiz questions.

    Line numbers in ``skipped_lines`` are 1-based positions in the input.
    """
    result = CSVParseResult()
    header_checked = False

    reader = csv.reader(io.StringIO(text), skipinitialspace=True)
    for row in reader:
        line_no = reader.line_num
        columns = [_clean(c) for c in row]
        if not any(columns):
            continue

        if not header_checked:
            header_checked = True
            if "question" in ",".join(columns).lower():
                continue

        if len(columns) < MIN_COLUMNS:
            logger.debug("Skipping CSV line %d: %d columns", line_no, len(columns))
            result.skipped_lines.append(line_no)
            continue

        category = columns[6] if len(columns) > 6 and columns[6] else default_category
        result.questions.append({
            "question": columns[0],
            "options": columns[1:5],
            "correct_answer": parse_correct_answer(columns[5]),
            "category": category,
        })

    logger.info(
        "Parsed %d questions from CSV (%d lines skipped)",
        len(result.questions), len(result.skipped_lines),
    )
    return result
