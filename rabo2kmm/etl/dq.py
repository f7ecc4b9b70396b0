"""
Data Quality Engine - Non-fatal validation of tokenized export records.

Every schema position is checked for presence, maximum length and format.
Issues are collected and reported, never raised: a malformed record is
still handed to the transformer (best-effort policy).

All checks are rule-based and fully traceable to the field definitions
in schema.py.
"""
import re
from typing import Dict, List, Sequence
from .models import FieldDefinition, FieldRule, SchemaVersion


RULE_PATTERNS: Dict[FieldRule, re.Pattern] = {
    FieldRule.NUMERIC: re.compile(r'[0-9]*'),
    FieldRule.DEBIT_CREDIT: re.compile(r'[CD]?', re.IGNORECASE),
    FieldRule.ACCOUNT: re.compile(r'|P?[0-9]+|[A-Z]{2}[0-9]{2}[A-Z0-9]{4,}', re.IGNORECASE),
    FieldRule.AMOUNT_POINT: re.compile(r'[+-]?[0-9]+(\.[0-9]*)?'),
    FieldRule.AMOUNT_COMMA: re.compile(r'[+-]?[0-9]+(,[0-9]*)?'),
    FieldRule.DATE_COMPACT: re.compile(r'([0-9]{8})?'),
    FieldRule.DATE_ISO: re.compile(r'([0-9]{4}-[0-9]{2}-[0-9]{2})?'),
}


class RecordValidator:
    """
    Checks records against a schema version and keeps run statistics.
    """

    def __init__(self):
        self.stats = {"checked": 0, "invalid": 0}

    def validate(self, record: Sequence[str], version: SchemaVersion) -> List[str]:
        """
        Return one issue per offending position; an empty list means valid.
        """
        issues: List[str] = []
        for position, definition in enumerate(version.fields):
            if position >= len(record):
                issues.append(self._issue(position, definition, "missing"))
                continue
            problem = self._check(record[position], definition)
            if problem:
                issues.append(self._issue(position, definition, problem))

        extra = len(record) - version.column_count
        if extra > 0:
            issues.append(f"{extra} unexpected trailing field(s), expected {version.column_count}")

        self.stats["checked"] += 1
        if issues:
            self.stats["invalid"] += 1
        return issues

    def _check(self, value: str, definition: FieldDefinition) -> str:
        if len(value) > definition.max_length:
            return f"longer than {definition.max_length}"
        pattern = RULE_PATTERNS.get(definition.rule)
        if pattern and not pattern.fullmatch(value):
            return f"does not match {definition.rule.value}"
        return ""

    def _issue(self, position: int, definition: FieldDefinition, problem: str) -> str:
        return f"field {position + 1} ({definition.name}): {problem}"

    def get_stats(self) -> Dict[str, int]:
        return self.stats.copy()

    @staticmethod
    def describe(issues: List[str]) -> str:
        return "; ".join(issues)
