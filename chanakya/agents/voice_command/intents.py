"""
Keyword and regex extraction of intents and entities from command text
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

INTENTS = (
    "add_supplier",
    "edit_supplier",
    "delete_supplier",
    "score_supplier",
    "generate_report",
    "navigate",
)
UNKNOWN = "unknown"

KEYWORD_CONFIDENCE = 0.85

VIEWS = ("grid", "matrix", "analytics", "criteria")

# Spoken word -> criteria catalog category tag
CRITERIA_KEYWORDS = [
    ("quality", "quality"),
    ("price", "cost"),
    ("pricing", "cost"),
    ("cost", "cost"),
    ("delivery", "leadTime"),
    ("lead time", "leadTime"),
    ("service", "reliability"),
    ("reliability", "reliability"),
    ("trust", "reliability"),
    ("sustainability", "sustainability"),
    ("environment", "sustainability"),
]

_NAME_STOP = r"(?=\s+(?:for|with|to|in|at|and|score|rating|status|email|phone)\b|\s*\d|\s*$|[,.!?])"

_SUPPLIER_NAME = re.compile(r"supplier\s+(?:named\s+|called\s+)?([A-Za-z][A-Za-z&.'\- ]*?)" + _NAME_STOP, re.I)
_SCORE_TARGET = re.compile(r"\b(?:score|rate)\s+(?!supplier\b)([A-Za-z][A-Za-z&.'\- ]*?)\s+(?:at\s+)?\d", re.I)
_SCORE_AFTER_WORD = re.compile(r"\bscore\s+(\d+(?:\.\d+)?)", re.I)
_SCORE_WITH_UNIT = re.compile(r"(\d+(?:\.\d+)?)\s*(?:points?|%|percent|out of)", re.I)
_ANY_NUMBER = re.compile(r"\b(\d+(?:\.\d+)?)\b")
_OUT_OF_TEN = re.compile(r"out of\s+10\b|/\s*10\b", re.I)
_EMAIL = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@,]+")
_PHONE = re.compile(r"phone\s+(?:number\s+)?(?:to\s+)?([+\d][\d\-\s()]{5,}\d)", re.I)
_INDUSTRY = re.compile(r"(?:in\s+(?:the\s+)?([A-Za-z ]+?)\s+industry|industry\s+(?:to\s+)?([A-Za-z ]+?)(?=\s+(?:and|with)\b|[,.]|$))", re.I)
_STATUS = re.compile(r"status\s+(?:to\s+)?(active|inactive|pending|rejected)", re.I)
_REPORT_TYPE = re.compile(r"(\w+)\s+report", re.I)


@dataclass
class VoiceCommand:
    text: str
    intent: str
    entities: Dict[str, Any] = field(default_factory=dict)
    confidence: float = KEYWORD_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "intent": self.intent,
            "entities": self.entities,
            "confidence": self.confidence,
        }


def _has(pattern: str, text: str) -> bool:
    return re.search(rf"\b(?:{pattern})\b", text) is not None


def extract_intent(text: str) -> str:
    lower = (text or "").lower()
    mentions_supplier = _has("suppliers?", lower)

    if mentions_supplier and _has("add", lower):
        return "add_supplier"
    if mentions_supplier and _has("edit|update", lower):
        return "edit_supplier"
    if mentions_supplier and _has("delete|remove", lower):
        return "delete_supplier"
    if _has("score|rate", lower):
        return "score_supplier"
    if _has("report|generate", lower):
        return "generate_report"
    if _has("show|view|open", lower):
        return "navigate"
    return UNKNOWN


def _supplier_name(text: str) -> Optional[str]:
    match = _SUPPLIER_NAME.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    match = _SCORE_TARGET.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return None


def _score(text: str) -> Optional[float]:
    for pattern in (_SCORE_AFTER_WORD, _SCORE_WITH_UNIT):
        match = pattern.search(text)
        if match:
            return float(match.group(1))
    if _has("score|rate", text.lower()):
        numbers = _ANY_NUMBER.findall(text)
        if numbers:
            return float(numbers[0])
    return None


def extract_entities(text: str) -> Dict[str, Any]:
    text = text or ""
    lower = text.lower()
    entities: Dict[str, Any] = {}

    name = _supplier_name(text)
    if name:
        entities["supplierName"] = name

    score = _score(text)
    if score is not None:
        entities["score"] = score
        if _OUT_OF_TEN.search(text):
            entities["scale"] = "ten"

    for keyword, category in CRITERIA_KEYWORDS:
        if keyword in lower:
            entities["criteria"] = category
            break

    email = _EMAIL.search(text)
    if email:
        entities["email"] = email.group(0).rstrip(".")

    phone = _PHONE.search(text)
    if phone:
        entities["phone"] = phone.group(1).strip()

    industry = _INDUSTRY.search(text)
    if industry:
        entities["industry"] = (industry.group(1) or industry.group(2)).strip().title()

    status = _STATUS.search(text)
    if status:
        entities["status"] = status.group(1).lower()

    report = _REPORT_TYPE.search(text)
    if report and report.group(1).lower() not in ("a", "the", "generate"):
        entities["reportType"] = report.group(1).lower()

    for view in VIEWS:
        if view in lower:
            entities["view"] = view
            break

    return entities


def parse_command(text: str) -> VoiceCommand:
    intent = extract_intent(text)
    entities = extract_entities(text)
    confidence = KEYWORD_CONFIDENCE if intent != UNKNOWN else 0.0
    return VoiceCommand(text=text, intent=intent, entities=entities, confidence=confidence)
