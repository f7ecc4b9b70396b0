"""
Transform Layer - Maps export records onto the KMyMoney import layout.

This module implements:
1. Field selection by the fixed positions of a schema version
2. Debit/credit column split for layouts with a separate D/C code
3. Literal decimal-point to decimal-comma rewrite of amounts
4. Memo synthesis from description and identifier fields

Records shorter than their schema are tolerated: every missing position
reads as an empty string.
"""
from typing import Optional, Sequence
from .models import SchemaVersion, TargetRecord


class RecordTransformer:
    """
    Deterministic transformer for one schema version.
    Pure functions of the record; no state is kept between lines.
    """

    def __init__(self, version: SchemaVersion):
        self.version = version

    def to_target(self, record: Sequence[str]) -> TargetRecord:
        v = self.version
        amount = self.rewrite_decimal(self._get(record, v.amount))
        name = self._get(record, v.name)

        target = TargetRecord(
            number=self._get(record, v.number),
            date=self._get(record, v.date),
            code=self._get(record, v.code),
            payee=name or self._get(record, v.payee_fallback),
            memo=self.memo(record),
        )

        if v.splits_amount:
            direction = self._get(record, v.debit_credit).lower()
            if direction == "d":
                target.debit = amount
            elif direction == "c":
                target.credit = amount
        else:
            target.amount = amount
        return target

    def memo(self, record: Sequence[str]) -> str:
        """
        Build the memo column.

        Layout: [counter account] payment-reference description identifiers
        """
        v = self.version
        has_name = bool(self._get(record, v.name))

        # Description chunks are split mid-word by the bank; join without separator.
        description = "".join(
            self._get(record, idx)
            for idx in v.descriptions
            if not (has_name and idx == v.memo_lead)
        ).strip()

        identifiers = " ".join(
            value for value in (self._get(record, idx).strip() for idx in v.identifiers) if value
        )

        reference = self._get(record, v.payment_reference)
        memo = " ".join(part for part in (reference, description, identifiers) if part)

        counter_account = self._get(record, v.counter_account)
        if counter_account:
            memo = f"[{counter_account}] {memo}"
        return memo

    @staticmethod
    def rewrite_decimal(amount: str) -> str:
        return amount.replace(".", ",")

    @staticmethod
    def _get(record: Sequence[str], idx: Optional[int]) -> str:
        if idx is None or idx >= len(record):
            return ""
        return record[idx]
