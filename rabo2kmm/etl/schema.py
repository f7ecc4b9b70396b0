"""
Schema Registry - Column layouts of the supported Rabobank export versions.

Each version is described as data (a SchemaVersion): the ordered field
definitions used for validation and the fixed positions the transformer
reads. Adding a layout means adding an entry here, not another pipeline.

Versions:
- v1: 19 columns, no header row, YYYYMMDD dates, decimal point, D/C code
- v2: 19 columns, header row, ISO dates, decimal comma, D/C code
- v3: 26 columns, header row, 2018 SEPA export with signed amounts
"""
import re
from typing import Dict, Optional, Tuple
from .extract import tokenize
from .models import FieldDefinition, FieldRule, SchemaVersion


F = FieldDefinition
R = FieldRule

# Field lengths follow the bank's published format descriptions.
V1_FIELDS: Tuple[FieldDefinition, ...] = (
    F("rekeningnummer", 35, R.ACCOUNT),
    F("muntsoort", 3),
    F("rentedatum", 8, R.DATE_COMPACT),
    F("bij_af_code", 1, R.DEBIT_CREDIT),
    F("bedrag", 14, R.AMOUNT_POINT),
    F("tegenrekening", 35, R.ACCOUNT),
    F("naar_naam", 70),
    F("boekdatum", 8, R.DATE_COMPACT),
    F("boekcode", 2),
    F("filler", 6),
    F("omschrijving_1", 35),
    F("omschrijving_2", 35),
    F("omschrijving_3", 35),
    F("omschrijving_4", 35),
    F("omschrijving_5", 35),
    F("omschrijving_6", 35),
    F("end_to_end_id", 35),
    F("id_tegenrekeninghouder", 35),
    F("mandaat_id", 35),
)

V2_FIELDS: Tuple[FieldDefinition, ...] = (
    F("rekeningnummer", 34, R.ACCOUNT),
    F("muntsoort", 4),
    F("boekdatum", 10, R.DATE_ISO),
    F("bij_af_code", 1, R.DEBIT_CREDIT),
    F("bedrag", 18, R.AMOUNT_COMMA),
    F("tegenrekening", 34, R.ACCOUNT),
    F("naam_tegenpartij", 70),
    F("rentedatum", 10, R.DATE_ISO),
    F("boekcode", 4),
    F("filler", 6),
    F("omschrijving_1", 35),
    F("omschrijving_2", 35),
    F("omschrijving_3", 35),
    F("omschrijving_4", 35),
    F("omschrijving_5", 35),
    F("omschrijving_6", 35),
    F("end_to_end_id", 35),
    F("id_tegenrekeninghouder", 35),
    F("mandaat_id", 35),
)

V3_FIELDS: Tuple[FieldDefinition, ...] = (
    F("iban_bban", 34, R.ACCOUNT),
    F("munt", 4),
    F("bic", 11),
    F("volgnr", 18, R.NUMERIC),
    F("datum", 10, R.DATE_ISO),
    F("rentedatum", 10, R.DATE_ISO),
    F("bedrag", 18, R.AMOUNT_COMMA),
    F("saldo_na_trn", 18, R.AMOUNT_COMMA),
    F("tegenrekening", 34, R.ACCOUNT),
    F("naam_tegenpartij", 70),
    F("naam_uiteindelijke_partij", 70),
    F("naam_initierende_partij", 70),
    F("bic_tegenpartij", 15),
    F("code", 4),
    F("batch_id", 35),
    F("transactiereferentie", 35),
    F("machtigingskenmerk", 35),
    F("incassant_id", 35),
    F("betalingskenmerk", 35),
    F("omschrijving_1", 140),
    F("omschrijving_2", 140),
    F("omschrijving_3", 140),
    F("reden_retour", 75),
    F("oorspr_bedrag", 18),
    F("oorspr_munt", 11),
    F("koers", 11),
)


V1 = SchemaVersion(
    tag="v1",
    description="19 columns, no header, YYYYMMDD dates, D/C code",
    fields=V1_FIELDS,
    has_header=False,
    account=0,
    date=7,
    debit_credit=3,
    amount=4,
    counter_account=5,
    name=6,
    code=8,
    payee_fallback=10,
    memo_lead=6,
    descriptions=(6, 10, 11, 12, 13, 14, 15),
    identifiers=(16, 17, 18),
)

V2 = SchemaVersion(
    tag="v2",
    description="19 columns, header row, ISO dates, D/C code",
    fields=V2_FIELDS,
    has_header=True,
    account=0,
    date=2,
    debit_credit=3,
    amount=4,
    counter_account=5,
    name=6,
    code=8,
    payee_fallback=10,
    memo_lead=6,
    descriptions=(6, 10, 11, 12, 13, 14, 15),
    identifiers=(16, 17, 18),
)

V3 = SchemaVersion(
    tag="v3",
    description="26 columns, header row, 2018 SEPA export, signed amounts",
    fields=V3_FIELDS,
    has_header=True,
    account=0,
    number=3,
    date=4,
    amount=6,
    counter_account=8,
    name=9,
    code=13,
    payee_fallback=19,
    payment_reference=18,
    descriptions=(19, 20, 21),
    identifiers=(16, 17),
)

SCHEMA_VERSIONS: Dict[str, SchemaVersion] = {v.tag: v for v in (V1, V2, V3)}

COMPACT_DATE = re.compile(r'[0-9]{8}')
DEBIT_CREDIT = re.compile(r'[CD]', re.IGNORECASE)
POINT_AMOUNT = re.compile(r'[+-]?[0-9]+(\.[0-9]*)?')


def get_schema_version(tag: str) -> SchemaVersion:
    try:
        return SCHEMA_VERSIONS[tag.lower()]
    except KeyError:
        known = ", ".join(sorted(SCHEMA_VERSIONS))
        raise ValueError(f"Unsupported schema version: {tag} (known: {known})") from None


def get_schema(tag: str) -> Tuple[FieldDefinition, ...]:
    """Return the ordered field definitions for a version tag."""
    return get_schema_version(tag).fields


def detect_schema_version(first_line: str) -> Optional[SchemaVersion]:
    """
    Guess the export version from the first line of a file.

    v1 files start with a data row, v2 files with a header row of the same
    width. Any single data column is enough to tell them apart, since dates
    and D/C codes may be empty in a v1 row but header labels never look
    like data. Returns None when the line matches no known layout.
    """
    tokens = tokenize(first_line)
    if len(tokens) == V3.column_count:
        return V3
    if len(tokens) == V1.column_count:
        return V1 if _is_v1_data_row(tokens) else V2
    return None


def _is_v1_data_row(tokens) -> bool:
    return bool(
        COMPACT_DATE.fullmatch(tokens[2])
        or COMPACT_DATE.fullmatch(tokens[7])
        or DEBIT_CREDIT.fullmatch(tokens[3])
        or POINT_AMOUNT.fullmatch(tokens[4])
    )
