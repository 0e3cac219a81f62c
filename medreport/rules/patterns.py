"""Ordered (pattern, extractor) rules for the baseline extractor.

Rule order is precedence: for singular fields the first rule producing a value
wins, for list fields a later rule never claims text an earlier rule matched.
"""

import re
from collections.abc import Callable
from datetime import date
from typing import Any

from medreport.rules.models import (
    DIAGNOSIS_CONFIDENCE,
    LAB_CONFIDENCE,
    MEDICATION_CONFIDENCE,
    Diagnosis,
    LabResult,
    Medication,
)

Rule = tuple[re.Pattern[str], Callable[[re.Match[str]], Any]]

ROUTES = ("oral", "iv", "im", "sc", "topical", "inhalation")

_CAPITALIZED_NAME = r"[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*"
_DRUG_SUFFIX_NAME = r"\b(?i:[a-z]+(?:cin|mycin|illin|azole|pine|sartan|pril|olol|statin|mab))\b"
_DOSE_UNIT = r"(?i:mcg|mg|g|ml|units?)"
_DOSE = rf"(?P<amount>\d+(?:\.\d+)?)[ \t]*(?P<unit>{_DOSE_UNIT})\b(?!/)"
_FREQUENCY_WORD = r"(?!for\b)(?:[a-z]+|[A-Z]{2,4})\b"
_FREQUENCY = rf"(?P<frequency>{_FREQUENCY_WORD}(?:[ \t]+{_FREQUENCY_WORD}){{0,2}})"
_DURATION = r"(?:[ \t]+(?:for[ \t]+)?(?P<duration>\d+[ \t]*(?i:days?|weeks?|months?)))?"
_LAB_VALUE = (
    rf"[ \t]*:?[ \t]*(?P<value>\d+(?:\.\d+)?)[ \t]*"
    rf"(?!{_DOSE_UNIT}\b(?!/))(?P<units>[A-Za-z%]+(?:/[A-Za-z0-9.]+)?)"
    r"(?:[ \t]*\((?P<ref_range>[^)\n]*)\))?"
)
_DIAGNOSIS_PHRASE = r"(?P<text>[A-Z][a-z]+(?:[ \t]+[a-z0-9]+)*)"
_REF_RANGE = re.compile(r"(\d+(?:\.\d+)?)\s*[-–]\s*(\d+(?:\.\d+)?)")


def normalize_mdy(month: str, day: str, year: str) -> str | None:
    """Build an ISO date from month/day/year parts. Two-digit years are 20xx."""
    if len(year) not in (2, 4):
        return None
    full_year = f"20{year}" if len(year) == 2 else year
    try:
        return date(int(full_year), int(month), int(day)).isoformat()
    except ValueError:
        return None


def lab_flag(value: float, ref_range: str | None) -> str:
    """Compare a value to a "low-high" reference range."""
    if not ref_range:
        return "normal"
    match = _REF_RANGE.search(ref_range)
    if match is None:
        return "normal"
    low, high = float(match.group(1)), float(match.group(2))
    if value < low:
        return "low"
    if value > high:
        return "high"
    return "normal"


def find_route(span: str) -> str | None:
    """First route in ROUTES order that occurs anywhere in the span."""
    lowered = span.lower()
    for route in ROUTES:
        if route in lowered:
            return route
    return None


def _stripped(match: re.Match[str]) -> str | None:
    return match.group(1).strip() or None


def _mdy(match: re.Match[str]) -> str | None:
    return normalize_mdy(match.group(1), match.group(2), match.group(3))


def _ymd(match: re.Match[str]) -> str | None:
    return normalize_mdy(match.group(2), match.group(3), match.group(1))


def _sex(match: re.Match[str]) -> str | None:
    return "M" if match.group(1).lower().startswith("m") else "F"


def _medication(match: re.Match[str]) -> Medication | None:
    name = match.group("name")
    amount = match.group("amount")
    if not name or not amount:
        return None
    groups = match.groupdict()
    raw_text = match.string[match.start("name"):match.end()].strip()
    return Medication(
        name=name,
        dose=f"{amount} {match.group('unit').lower()}",
        frequency=groups.get("frequency"),
        route=find_route(raw_text),
        duration=groups.get("duration"),
        raw_text=raw_text,
        confidence=MEDICATION_CONFIDENCE,
    )


def _lab(match: re.Match[str]) -> LabResult | None:
    value = float(match.group("value"))
    ref_range = match.group("ref_range")
    ref_range = ref_range.strip() if ref_range else None
    return LabResult(
        name=match.group("name").strip(),
        value=value,
        units=match.group("units").strip(),
        ref_range=ref_range,
        flag=lab_flag(value, ref_range),
        confidence=LAB_CONFIDENCE,
    )


def _diagnosis(match: re.Match[str]) -> Diagnosis | None:
    return Diagnosis(text=match.group("text").strip(), icd10=None, confidence=DIAGNOSIS_CONFIDENCE)


def _blood_pressure(match: re.Match[str]) -> str | None:
    return f"{match.group(1)}/{match.group(2)}"


def _temperature(match: re.Match[str]) -> str | None:
    return f"{match.group(1)} {match.group(2).upper()}"


NAME_RULES: list[Rule] = [
    (
        re.compile(rf"\b(?i:patient(?:[ \t]+name)?|name|pt\.?)[ \t]*:?[ \t]*({_CAPITALIZED_NAME})"),
        _stripped,
    ),
    (
        re.compile(rf"\b(?i:mrs|mr|ms|dr)\.?[ \t]+({_CAPITALIZED_NAME})"),
        _stripped,
    ),
]

_DOB_LABEL = r"\b(?i:dob|date[ \t]+of[ \t]+birth|birth[ \t]+date)[ \t]*:?[ \t]*"

DOB_RULES: list[Rule] = [
    (re.compile(rf"{_DOB_LABEL}(\d{{1,2}})[/-](\d{{1,2}})[/-](\d{{2,4}})\b"), _mdy),
    (re.compile(rf"{_DOB_LABEL}(\d{{4}})-(\d{{1,2}})-(\d{{1,2}})\b"), _ymd),
    (re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})\b"), _mdy),
]

SEX_RULES: list[Rule] = [
    (re.compile(r"\b(?:sex|gender)[ \t]*:?[ \t]*(male|female|m|f)\b", re.IGNORECASE), _sex),
]

ID_RULES: list[Rule] = [
    (
        re.compile(
            r"\b(?i:mrn|patient[ \t]+id|medical[ \t]+record(?:[ \t]+(?:number|no\.?))?|id)"
            r"[ \t]*[:#]?[ \t]*([A-Z0-9][A-Z0-9\-]*)\b"
        ),
        _stripped,
    ),
]

MEDICATION_RULES: list[Rule] = [
    (
        re.compile(
            r"\b(?i:rx|prescription|medications?)[ \t]*:?[ \t]*"
            rf"(?P<name>[A-Za-z][A-Za-z\-]+)[ \t]+{_DOSE}(?:[ \t]+{_FREQUENCY})?{_DURATION}"
        ),
        _medication,
    ),
    (
        re.compile(rf"(?P<name>{_DRUG_SUFFIX_NAME})[ \t]+{_DOSE}[ \t]+{_FREQUENCY}{_DURATION}"),
        _medication,
    ),
    (
        re.compile(rf"(?P<name>{_DRUG_SUFFIX_NAME})[ \t]+{_DOSE}"),
        _medication,
    ),
]

LAB_RULES: list[Rule] = [
    (
        re.compile(
            rf"\b(?P<name>[A-Z][A-Za-z0-9]*(?:[ \t]+[A-Z][A-Za-z0-9]*)*){_LAB_VALUE}"
        ),
        _lab,
    ),
    (
        re.compile(
            r"\b(?P<name>(?i:hb|hgb|hemoglobin|wbc|rbc|platelets?|glucose|cholesterol"
            rf"|creatinine|bun|sodium|potassium|chloride))\b{_LAB_VALUE}"
        ),
        _lab,
    ),
]

DIAGNOSIS_RULES: list[Rule] = [
    (re.compile(rf"\b(?i:diagnos[ie]s|dx|condition)[ \t]*:?[ \t]*{_DIAGNOSIS_PHRASE}"), _diagnosis),
    (re.compile(rf"\b(?i:impression|assessment)[ \t]*:?[ \t]*{_DIAGNOSIS_PHRASE}"), _diagnosis),
]

VITAL_RULES: dict[str, Rule] = {
    "temperature": (
        re.compile(
            r"\b(?:temp|temperature)\b[ \t]*:?[ \t]*(\d+(?:\.\d+)?)[ \t]*°?[ \t]*([FC])\b",
            re.IGNORECASE,
        ),
        _temperature,
    ),
    "blood_pressure": (
        re.compile(
            r"\b(?:bp|blood[ \t]+pressure)\b[ \t]*:?[ \t]*(\d{2,3})[ \t]*/[ \t]*(\d{2,3})",
            re.IGNORECASE,
        ),
        _blood_pressure,
    ),
    "heart_rate": (
        re.compile(
            r"\b(?:hr|heart[ \t]+rate|pulse)\b[ \t]*:?[ \t]*(\d{2,3})\b(?:[ \t]*bpm)?",
            re.IGNORECASE,
        ),
        _stripped,
    ),
    "respiratory_rate": (
        re.compile(
            r"\b(?:rr|respiratory[ \t]+rate|resp)\b[ \t]*:?[ \t]*(\d{1,2})\b",
            re.IGNORECASE,
        ),
        _stripped,
    ),
    "oxygen_saturation": (
        re.compile(
            r"\b(?:spo2|o2[ \t]+sat(?:uration)?|oxygen[ \t]+saturation)\b[ \t]*:?[ \t]*(\d{2,3})[ \t]*%",
            re.IGNORECASE,
        ),
        _stripped,
    ),
}
