"""Loading person snapshots from JSON records and GEDCOM files."""

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from pathlib import Path
import json
import re

from ged4py import GedcomReader

from errors import InputValidationError
from models import Person

REQUIRED_FIELDS = ("id", "name", "birthDate")

# Month name mappings (handle abbreviations and full names)
MONTH_MAP = {
    "JAN": 1, "JANUARY": 1,
    "FEB": 2, "FEBRUARY": 2,
    "MAR": 3, "MARCH": 3,
    "APR": 4, "APRIL": 4,
    "MAY": 5,
    "JUN": 6, "JUNE": 6,
    "JUL": 7, "JULY": 7,
    "AUG": 8, "AUGUST": 8,
    "SEP": 9, "SEPT": 9, "SEPTEMBER": 9,
    "OCT": 10, "OCTOBER": 10,
    "NOV": 11, "NOVEMBER": 11,
    "DEC": 12, "DECEMBER": 12,
}

# (pattern, order of the captured groups); "M" may be a month name or number
DATE_PATTERNS = [
    (r"^(\d{4})-(\d{1,2})-(\d{1,2})$", "YMD"),  # 1839-08-29
    (r"^(\d{4})/(\d{1,2})/(\d{1,2})$", "YMD"),  # 1839/08/29
    (r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$", "DMY"),  # 25 NOV 1954, 02 May1838
    (r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$", "MDY"),  # April 17, 1850
    (r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$", "MDY"),  # 01-27-1920, 1/15/1957
    (r"^([A-Za-z]+)\.?,?\s*(\d{4})$", "MY"),  # NOV 1954, May, 1837
    (r"^(\d{4})$", "Y"),  # 1698
]


def _month_number(value: str) -> int | None:
    if value.isdigit():
        return int(value)
    return MONTH_MAP.get(value.upper().rstrip("."))


def parse_date_string(date_str: str | None) -> date | None:
    """
    Parse a birth date string into a date.

    Handles ISO dates as well as the free-text forms found in GEDCOM exports,
    e.g. "25 NOV 1954", "ABT 1905", "JAN 1905", "(April 17, 1850)" or
    "01/27/1920". Missing month or day default to 1.
    Returns None if the date cannot be parsed.
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    # Remove qualifiers (ABT, ABOUT, BEF, AFT, EST, CAL, AROUND, ...) with optional colon
    s = re.sub(
        r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|FROM|TO|BET\.?|AND|CIRCA|CA\.?|AROUND):?\s*",
        "",
        s,
        flags=re.IGNORECASE,
    ).strip()
    if not s:
        return None

    for pattern, order in DATE_PATTERNS:
        match = re.match(pattern, s)
        if not match:
            continue
        parts = dict(zip(order, match.groups()))
        month = _month_number(parts["M"]) if "M" in parts else 1
        if month is None:
            continue
        # 00 month/day in partial ISO dates
        month = month or 1
        day = int(parts.get("D", 1)) or 1
        try:
            return date(int(parts["Y"]), month, day)
        except ValueError:
            return None

    return None


def _parse_birth_date(value, label: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date_string(str(value))
    if parsed is None:
        raise InputValidationError(f"{label}: birthDate {value!r} is not a recognizable date")
    return parsed


def _as_id(value, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InputValidationError(f"{label}: {value!r} is not a positive integer id")
    return value


def _as_id_list(value, label: str) -> tuple[int, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise InputValidationError(f"{label}: expected a list of ids, got {type(value).__name__}")
    return tuple(_as_id(ref, label) for ref in value)


def _person_from_record(record: Mapping, index: int) -> Person:
    label = f"Record #{index + 1}"
    missing = [key for key in REQUIRED_FIELDS if record.get(key) in (None, "")]
    if missing:
        raise InputValidationError(
            f"{label} is missing required field(s) {', '.join(missing)}; "
            "every person needs an id, a name and a birthDate"
        )

    person_id = _as_id(record["id"], f"{label} id")
    label = f"Person {person_id}"
    name = record["name"]
    if not isinstance(name, str):
        raise InputValidationError(f"{label}: name must be a string")

    spouse_id = record.get("spouseId")
    return Person(
        id=person_id,
        name=name,
        birth_date=_parse_birth_date(record["birthDate"], label),
        parent_ids=_as_id_list(record.get("parentIds"), f"{label} parentIds"),
        spouse_id=_as_id(spouse_id, f"{label} spouseId") if spouse_id is not None else None,
        children_ids=_as_id_list(record.get("childrenIds"), f"{label} childrenIds"),
    )


def persons_from_records(records) -> tuple[Person, ...]:
    """
    Validate raw records and turn them into an immutable person snapshot.

    Records may be mappings using the camelCase input keys (id, name,
    birthDate, parentIds, spouseId, childrenIds) or Person objects.

    Raises:
        InputValidationError: if `records` is not a sequence, a record lacks
            id/name/birthDate, or ids are invalid or duplicated.
    """
    if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
        raise InputValidationError(
            f"Person data must be a list of records, got {type(records).__name__}"
        )

    persons: list[Person] = []
    seen: set[int] = set()
    for index, record in enumerate(records):
        if isinstance(record, Person):
            _as_id(record.id, f"Record #{index + 1} id")
            if not record.name:
                raise InputValidationError(f"Person {record.id} has an empty name")
            if not isinstance(record.birth_date, date):
                raise InputValidationError(
                    f"Person {record.id}: birth_date must be a date, "
                    f"got {type(record.birth_date).__name__}"
                )
            for field_name in ("parent_ids", "children_ids"):
                for ref in getattr(record, field_name):
                    _as_id(ref, f"Person {record.id} {field_name}")
            if record.spouse_id is not None:
                _as_id(record.spouse_id, f"Person {record.id} spouse_id")
            person = record
        elif isinstance(record, Mapping):
            person = _person_from_record(record, index)
        else:
            raise InputValidationError(
                f"Record #{index + 1} must be an object, got {type(record).__name__}"
            )

        if person.id in seen:
            raise InputValidationError(f"Person id {person.id} appears more than once")
        seen.add(person.id)
        persons.append(person)

    return tuple(persons)


# ============================================================================
# GEDCOM
# ============================================================================


def extract_numeric_id(xref_id: str) -> int:
    """Extract numeric part from GEDCOM xref_id like '@I_347421849@' or 'I674624289'."""
    digits = re.sub(r"[^0-9]", "", xref_id)
    if not digits:
        raise ValueError(f"No numeric ID found in: {xref_id}")
    return int(digits)


def extract_name(indi) -> str:
    """Full display name of an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return "Unknown"

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        parts = [p for p in name_rec.value if p]
        return " ".join(parts) if parts else "Unknown"

    # Fallback: string format "Given /Surname/"
    return " ".join(str(name_rec.value).replace("/", " ").split()) or "Unknown"


def extract_event_date(indi, tag: str) -> str | None:
    """Raw date text of an event tag (BIRT, DEAT, etc.)."""
    event = indi.sub_tag(tag)
    if event is None:
        return None
    date_rec = event.sub_tag("DATE")
    # ged4py may return DateValue objects
    if date_rec and date_rec.value:
        return str(date_rec.value)
    return None


def records_from_gedcom(reader) -> list[dict]:
    """
    Convert GEDCOM individuals and families into input records.

    INDI records give id, name and birth date. FAM records give the
    parent-child links of both partners; the first family a person appears
    in as a partner defines their spouse, because a person record holds a
    single spouseId.
    """
    records: dict[int, dict] = {}

    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue
        person_id = extract_numeric_id(rec.xref_id)
        records[person_id] = {
            "id": person_id,
            "name": extract_name(rec),
            "birthDate": extract_event_date(rec, "BIRT"),
            "parentIds": [],
            "spouseId": None,
            "childrenIds": [],
        }

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue

        partners = []
        for tag in ("HUSB", "WIFE"):
            partner = rec.sub_tag(tag)
            if partner and partner.xref_id:
                partner_id = extract_numeric_id(partner.xref_id)
                if partner_id in records:
                    partners.append(partner_id)

        if len(partners) == 2:
            a, b = partners
            if records[a]["spouseId"] is None and records[b]["spouseId"] is None:
                records[a]["spouseId"] = b
                records[b]["spouseId"] = a

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = extract_numeric_id(child.xref_id)
            if child_id not in records:
                continue
            for parent_id in partners:
                if parent_id not in records[child_id]["parentIds"]:
                    records[child_id]["parentIds"].append(parent_id)
                if child_id not in records[parent_id]["childrenIds"]:
                    records[parent_id]["childrenIds"].append(child_id)

    return list(records.values())


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    return GedcomReader(str(filepath))


def load_persons(filepath: Path) -> tuple[Person, ...]:
    """
    Load a person snapshot from a `.json` record list or a `.ged` GEDCOM file.

    Raises:
        InputValidationError: if the file content is not valid person data.
    """
    filepath = Path(filepath)
    if filepath.suffix.lower() in (".ged", ".gedcom"):
        records = records_from_gedcom(parse_gedcom(filepath))
    else:
        with open(filepath, encoding="utf-8") as f:
            try:
                records = json.load(f)
            except json.JSONDecodeError as exc:
                raise InputValidationError(f"{filepath} is not valid JSON: {exc}") from exc
    return persons_from_records(records)
