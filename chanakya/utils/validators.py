"""
Input validation utilities
"""
import math
import re
from datetime import datetime
from typing import Any, List, Mapping, Optional

from chanakya.scoring.criteria import SCALE_MAX, SCALE_MIN, all_score_keys

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_FIELDS = [
    ("name", "Name is required"),
    ("contact_person", "Contact person is required"),
    ("email", "Email is required"),
    ("phone", "Phone is required"),
    ("industry", "Industry is required"),
]

SUPPLIER_STATUSES = ("active", "inactive", "pending", "rejected")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def validate_required_fields(data: Mapping[str, Any]) -> List[str]:
    """Every missing required field, in form order"""
    errors = []
    for field, message in REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or not str(value).strip():
            errors.append(message)
    return errors


def validate_email(email: Optional[str]) -> List[str]:
    if email and not is_valid_email(email.strip()):
        return ["Invalid email format"]
    return []


def validate_status(status: Optional[str]) -> List[str]:
    if status and status not in SUPPLIER_STATUSES:
        return [f"Invalid status: {status}"]
    return []


def validate_established_year(year: Optional[int]) -> List[str]:
    if year is None:
        return []
    current = datetime.now().year
    if year < 1900 or year > current:
        return [f"Established year must be between 1900 and {current}"]
    return []


def validate_scores(data: Mapping[str, Any]) -> List[str]:
    errors = []
    for key in all_score_keys():
        value = data.get(key)
        if value is None:
            continue
        # NaN compares false against both bounds
        if not math.isfinite(value) or value < SCALE_MIN or value > SCALE_MAX:
            errors.append(f"Score for {key} must be between {SCALE_MIN} and {SCALE_MAX}")
    return errors


def validate_supplier_data(data: Mapping[str, Any], partial: bool = False) -> List[str]:
    """
    Collect all validation messages for a supplier payload.
    With partial=True only the fields present are checked.
    """
    errors: List[str] = []
    if partial:
        for field, message in REQUIRED_FIELDS:
            if field in data and (data[field] is None or not str(data[field]).strip()):
                errors.append(message)
    else:
        errors.extend(validate_required_fields(data))
    errors.extend(validate_email(data.get("email")))
    errors.extend(validate_status(data.get("status")))
    errors.extend(validate_established_year(data.get("established_year")))
    errors.extend(validate_scores(data))
    return errors


def dedupe_certifications(certifications: Optional[List[str]]) -> List[str]:
    """Drop exact duplicates and blanks, keep first-seen order"""
    result: List[str] = []
    for cert in certifications or []:
        if cert and cert not in result:
            result.append(cert)
    return result
