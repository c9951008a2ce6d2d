"""
Bulk supplier import from CSV or XLSX.

Headers are normalised (lowercase, non-alphanumerics stripped) and mapped to
supplier fields by fragment. Anything else is treated as a score column and
matched against the sub-criterion keys and labels of the criteria catalog.

Each row is validated independently; a bad row is reported and never blocks
the rows after it. Score cells:
  - empty -> 0
  - not a number -> dropped (stored as 0) with a warning on the row
  - outside 0-100 -> row error
"""
import csv
import io
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from openpyxl import load_workbook

from chanakya.exceptions import ValidationError
from chanakya.scoring.criteria import DEFAULT_CRITERIA, all_score_keys
from chanakya.utils.helpers import parse_float
from chanakya.utils.validators import (
    dedupe_certifications,
    validate_email,
    validate_established_year,
    validate_required_fields,
    validate_scores,
    validate_status,
)

logger = logging.getLogger(__name__)

TEMPLATE_COLUMNS = [
    "name", "contact_person", "email", "phone", "industry", "status",
    "description", "address", "website", "established_year", "certifications",
] + all_score_keys()

TEMPLATE_ROWS = [
    ["ABC Manufacturing", "John Smith", "john@abc.com", "555-1234", "Manufacturing", "active",
     "High-quality components", "123 Main St", "abc.com", "2010", "ISO 9001;ISO 14001",
     "85", "78", "90", "82", "75", "80", "88", "85", "77", "89", "92", "87", "76", "81", "79"],
    ["XYZ Electronics", "Jane Doe", "jane@xyz.com", "555-5678", "Electronics", "pending",
     "Electronic components supplier", "456 Oak Ave", "xyz.com", "2015", "ISO 9001",
     "75", "82", "85", "78", "80", "75", "90", "88", "82", "85", "88", "90", "72", "78", "81"],
]

TEXT_DECODINGS = ["utf-8-sig", "utf-8", "cp1252", "latin-1"]


def normalize_header(header: str) -> str:
    return re.sub(r"[^a-z0-9]", "", (header or "").lower())


def _score_aliases() -> Dict[str, str]:
    aliases = {}
    for criterion in DEFAULT_CRITERIA:
        for sub in criterion.sub_criteria:
            aliases[normalize_header(sub.key)] = sub.key
            aliases[normalize_header(sub.name)] = sub.key
    # Older templates pluralised this column
    aliases["qualitycertificationsscore"] = "quality_certification_score"
    return aliases


SCORE_ALIASES = _score_aliases()


def map_header(header: str) -> Tuple[str, Optional[str]]:
    """
    Returns (kind, field) where kind is "field", "score" or "ignored".
    """
    h = normalize_header(header)
    if not h:
        return "ignored", None

    if h in SCORE_ALIASES:
        return "score", SCORE_ALIASES[h]
    if "name" in h and "contact" not in h:
        return "field", "name"
    if "contact" in h and "person" in h:
        return "field", "contact_person"
    if "email" in h:
        return "field", "email"
    if "phone" in h:
        return "field", "phone"
    if "industry" in h:
        return "field", "industry"
    if "status" in h:
        return "field", "status"
    if "description" in h:
        return "field", "description"
    if "address" in h:
        return "field", "address"
    if "website" in h:
        return "field", "website"
    if "establishedyear" in h or "founded" in h:
        return "field", "established_year"
    if "certification" in h:
        return "field", "certifications"
    return "ignored", None


@dataclass
class ParsedRow:
    row_index: int
    data: Dict[str, Any]
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row_index": self.row_index,
            "data": self.data,
            "errors": self.errors,
            "warnings": self.warnings,
            "valid": self.is_valid,
        }


@dataclass
class ImportReport:
    rows: List[ParsedRow]
    ignored_columns: List[str] = field(default_factory=list)

    @property
    def valid_rows(self) -> List[ParsedRow]:
        return [r for r in self.rows if r.is_valid]

    @property
    def valid_records(self) -> List[Dict[str, Any]]:
        return [r.data for r in self.valid_rows]

    @property
    def valid_count(self) -> int:
        return len(self.valid_rows)

    @property
    def error_count(self) -> int:
        return len(self.rows) - self.valid_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_rows": len(self.rows),
            "valid_count": self.valid_count,
            "error_count": self.error_count,
            "ignored_columns": self.ignored_columns,
            "rows": [r.to_dict() for r in self.rows],
        }


def parse_row(row_index: int, headers: Sequence[str], values: Sequence[Any]) -> ParsedRow:
    data: Dict[str, Any] = {}
    warnings: List[str] = []
    errors: List[str] = []

    for position, header in enumerate(headers):
        raw = values[position] if position < len(values) else ""
        value = "" if raw is None else str(raw).strip().strip('"').strip()
        kind, target = map_header(header)

        if kind == "field":
            if target == "established_year":
                if value:
                    year = parse_float(value)
                    if year is None:
                        errors.append("Established year must be a number")
                    else:
                        data["established_year"] = int(year)
            elif target == "certifications":
                data["certifications"] = dedupe_certifications(
                    [c.strip() for c in value.split(";") if c.strip()]
                )
            else:
                data[target] = value
        elif kind == "score":
            if not value:
                data[target] = 0.0
                continue
            number = parse_float(value)
            if number is None:
                warnings.append(f"Ignored non-numeric score for {target}: {value}")
            else:
                data[target] = number

    errors = validate_required_fields(data) + errors
    errors.extend(validate_email(data.get("email")))
    errors.extend(validate_status(data.get("status") or None))
    errors.extend(validate_established_year(data.get("established_year")))
    errors.extend(validate_scores(data))

    if not data.get("status"):
        data["status"] = "pending"

    return ParsedRow(row_index=row_index, data=data, errors=errors, warnings=warnings)


def parse_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> ImportReport:
    """Validate every data row; row_index is 1-based, counting from the first data row"""
    headers = [("" if h is None else str(h)).strip().strip('"') for h in headers]
    ignored = [h for h in headers if h and map_header(h)[0] == "ignored"]

    parsed = []
    for index, values in enumerate(rows, start=1):
        if not any(str(v).strip() for v in values if v is not None):
            continue
        parsed.append(parse_row(index, headers, values))

    report = ImportReport(rows=parsed, ignored_columns=ignored)
    logger.info(
        f"Parsed import: {len(parsed)} rows, {report.valid_count} valid, {report.error_count} with errors"
    )
    return report


def parse_csv_text(text: str) -> ImportReport:
    reader = csv.reader(io.StringIO(text.strip()))
    header = next(reader, None)
    if not header:
        raise ValidationError(["File has no header row"])
    return parse_table(header, list(reader))


def decode_text(content: bytes) -> str:
    for enc in TEXT_DECODINGS:
        try:
            return content.decode(enc)
        except (UnicodeDecodeError, LookupError):
            continue
    raise ValidationError(["Could not decode file"])


def parse_xlsx_bytes(content: bytes) -> ImportReport:
    """First worksheet, first row as header"""
    wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        rows = [list(r) for r in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    if not rows:
        raise ValidationError(["File has no header row"])
    return parse_table(rows[0], rows[1:])


def parse_upload(filename: str, content: bytes) -> ImportReport:
    if (filename or "").lower().endswith((".xlsx", ".xlsm")):
        return parse_xlsx_bytes(content)
    return parse_csv_text(decode_text(content))


def template_csv() -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(TEMPLATE_COLUMNS)
    writer.writerows(TEMPLATE_ROWS)
    return buf.getvalue()
