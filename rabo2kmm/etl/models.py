
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Tuple


class FieldRule(Enum):
    TEXT = "text"
    NUMERIC = "empty or digits"
    DEBIT_CREDIT = "empty, C or D"
    ACCOUNT = "empty, BBAN or IBAN"
    AMOUNT_POINT = "signed amount with decimal point"
    AMOUNT_COMMA = "signed amount with decimal comma"
    DATE_COMPACT = "empty or YYYYMMDD"
    DATE_ISO = "empty or YYYY-MM-DD"


@dataclass(frozen=True)
class FieldDefinition:
    name: str
    max_length: int
    rule: FieldRule = FieldRule.TEXT


@dataclass(frozen=True)
class SchemaVersion:
    """
    One supported export layout plus the fixed positions the transformer reads.

    Positions are 0-based indexes into the tokenized record. Optional
    positions are None when the layout has no such column.
    """
    tag: str
    description: str
    fields: Tuple[FieldDefinition, ...]
    has_header: bool
    account: int
    date: int
    amount: int
    code: int
    name: int
    counter_account: int
    payee_fallback: int
    descriptions: Tuple[int, ...]
    identifiers: Tuple[int, ...]
    number: Optional[int] = None
    debit_credit: Optional[int] = None
    memo_lead: Optional[int] = None
    payment_reference: Optional[int] = None

    @property
    def splits_amount(self) -> bool:
        return self.debit_credit is not None

    @property
    def column_count(self) -> int:
        return len(self.fields)


@dataclass
class TargetRecord:
    date: str
    code: str
    payee: str
    memo: str
    number: str = ""
    amount: Optional[str] = None
    debit: str = ""
    credit: str = ""

    def columns(self) -> List[str]:
        if self.amount is not None:
            return [self.number, self.date, self.amount, self.code, self.payee, self.memo]
        return [self.number, self.date, self.debit, self.credit, self.code, self.payee, self.memo]

    def render(self) -> str:
        # Empty columns become a single space to stay a non-empty quoted token.
        return ",".join(f'"{value or " "}"' for value in self.columns()) + "\n"


@dataclass
class FileResult:
    source_file: str
    success: bool = True
    schema_version: Optional[str] = None
    accounts: List[str] = field(default_factory=list)
    line_count: int = 0
    invalid_count: int = 0
    write_failures: int = 0
    error: Optional[str] = None
