# app/nl2sql.py

import logging
import re
from dataclasses import dataclass

from .errors import TranslationError
from .prompt import translation_messages, validation_messages
from .validate import strip_code_fences

logger = logging.getLogger(__name__)

_VALID_TAG = re.compile(r"^\s*VALID\s*:\s*(yes|no)\b", re.IGNORECASE | re.MULTILINE)
_ALIGNED_TAG = re.compile(r"^\s*ALIGNED\s*:\s*(yes|no)\b", re.IGNORECASE | re.MULTILINE)
_JUSTIFICATION_TAG = re.compile(r"^\s*JUSTIFICATION\s*:\s*(.*)", re.IGNORECASE | re.MULTILINE | re.DOTALL)
_SQL_TAG = re.compile(r"^[ \t]*SQL[ \t]*:(.*?)(?=\bEXPLANATION\s*:|\Z)", re.IGNORECASE | re.MULTILINE | re.DOTALL)
_EXPLANATION_TAG = re.compile(r"\bEXPLANATION\s*:\s*(.*)", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class ValidationVerdict:
    is_valid: bool
    is_aligned: bool
    justification: str

    @property
    def ok(self) -> bool:
        return self.is_valid and self.is_aligned


@dataclass(frozen=True)
class TranslationResult:
    sql_statement: str
    explanation: str


FAILED_VERDICT = ValidationVerdict(False, False, "Failed to validate query.")


def _yes(token: str) -> bool:
    return token.strip(".,;:!\"'").lower() == "yes"


def parse_verdict(content: str | None) -> ValidationVerdict:
    """
    Reads `VALID:` / `ALIGNED:` / `JUSTIFICATION:` lines when present,
    otherwise the first two tokens as yes/no and the rest as justification.
    Anything unreadable fails closed.
    """
    if not content or not content.strip():
        return FAILED_VERDICT

    valid, aligned = _VALID_TAG.search(content), _ALIGNED_TAG.search(content)
    if valid and aligned:
        justification = _JUSTIFICATION_TAG.search(content)
        return ValidationVerdict(
            is_valid=_yes(valid.group(1)),
            is_aligned=_yes(aligned.group(1)),
            justification=" ".join(justification.group(1).split()) if justification else "",
        )

    tokens = content.split()
    if len(tokens) < 2:
        return FAILED_VERDICT
    return ValidationVerdict(
        is_valid=_yes(tokens[0]),
        is_aligned=_yes(tokens[1]),
        justification=" ".join(tokens[2:]),
    )


def parse_translation(content: str | None) -> TranslationResult:
    """
    Reads the `SQL:` / `EXPLANATION:` tags when present, otherwise splits
    "SQL; explanation" on the first "; ". Raises TranslationError otherwise.

    The SQL is everything between the two tags, so it may start on the next
    line, span several lines, or sit in a fenced block.
    """
    if not content or not content.strip():
        raise TranslationError(detail="empty reply from the model")

    sql_match = _SQL_TAG.search(content)
    if sql_match:
        explanation = _EXPLANATION_TAG.search(content, sql_match.end())
        sql = strip_code_fences(sql_match.group(1))
        text = " ".join(explanation.group(1).rstrip("`").split()) if explanation else ""
    else:
        parts = strip_code_fences(content).split("; ", 1)
        if len(parts) != 2:
            raise TranslationError(detail=f"reply is not 'SQL; explanation': {content!r}")
        sql, text = parts[0].strip(), parts[1].strip()

    if not sql:
        raise TranslationError(detail=f"no SQL in reply: {content!r}")
    return TranslationResult(sql_statement=sql, explanation=text)


async def validate_question(gateway, question: str) -> ValidationVerdict:
    """
    Asks the model whether the question is a sensible, schema-aligned
    data request. Gateway errors propagate.
    """
    content = await gateway.chat(validation_messages(question))
    verdict = parse_verdict(content)
    logger.info(
        "Validation verdict: valid=%s aligned=%s | %s",
        verdict.is_valid,
        verdict.is_aligned,
        verdict.justification,
    )
    return verdict


async def translate_question(gateway, question: str) -> TranslationResult:
    content = await gateway.chat(translation_messages(question))
    result = parse_translation(content)
    logger.info("Translated to SQL: %s", result.sql_statement)
    return result
