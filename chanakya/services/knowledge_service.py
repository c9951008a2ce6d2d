"""
Knowledge base export for the voice assistant.

Formats a snapshot of all suppliers into a markdown document and pushes it
to the configured knowledge-base endpoint. Everything the report needs is
passed in explicitly; nothing is read from process-wide state.
"""
import logging
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from chanakya.config import get_settings
from chanakya.exceptions import PersistenceError
from chanakya.scoring.aggregator import category_score, overall_score
from chanakya.scoring.criteria import DEFAULT_CRITERIA, Criterion
from chanakya.scoring.ranking import SortState, sort_suppliers
from chanakya.services.analytics import status_counts, top_performers
from chanakya.utils.helpers import format_score, utcnow

settings = get_settings()
logger = logging.getLogger(__name__)


def _status(supplier) -> str:
    return str(getattr(supplier.status, "value", supplier.status) or "unknown")


def _average(suppliers: Sequence[Any]) -> float:
    if not suppliers:
        return 0.0
    return sum(overall_score(s.raw_scores) for s in suppliers) / len(suppliers)


def _group(suppliers: Sequence[Any], key) -> "OrderedDict[str, List[Any]]":
    groups: "OrderedDict[str, List[Any]]" = OrderedDict()
    for s in suppliers:
        groups.setdefault(key(s), []).append(s)
    return groups


def _performer_block(index: int, supplier, criteria: Tuple[Criterion, ...]) -> str:
    lines = [
        f"{index}. {supplier.name}",
        f"   - Industry: {supplier.industry}",
        f"   - Overall Score: {format_score(overall_score(supplier.raw_scores, criteria))}%",
        f"   - Status: {_status(supplier)}",
        f"   - Contact: {supplier.contact_person} ({supplier.email})",
        f"   - Established: {supplier.established_year or 'Unknown'}",
        f"   - Address: {supplier.address or ''}",
        f"   - Website: {supplier.website or ''}",
        "   - Key Strengths:",
    ]
    for c in criteria:
        lines.append(f"     * {c.name}: {format_score(category_score(supplier.raw_scores, c))}%")
    return "\n".join(lines)


def _detail_block(supplier, criteria: Tuple[Criterion, ...]) -> str:
    certifications = ", ".join(supplier.certifications or []) or "None listed"
    lines = [
        f"**{supplier.name}** (ID: {supplier.id})",
        f"- Industry: {supplier.industry}",
        f"- Status: {_status(supplier)}",
        f"- Overall Score: {format_score(overall_score(supplier.raw_scores, criteria))}%",
        f"- Contact Person: {supplier.contact_person}",
        f"- Email: {supplier.email}",
        f"- Phone: {supplier.phone}",
        f"- Address: {supplier.address or ''}",
        f"- Website: {supplier.website or ''}",
        f"- Established: {supplier.established_year or 'Unknown'}",
        f"- Description: {supplier.description or ''}",
        f"- Certifications: {certifications}",
        "",
        "Detailed Scores:",
    ]
    raw = supplier.raw_scores
    for c in criteria:
        for sub in c.sub_criteria:
            lines.append(f"- {sub.name}: {format_score(raw.get(sub.key))}%")
    updated = supplier.updated_at.isoformat() if supplier.updated_at else "Unknown"
    lines += ["", f"Last Updated: {updated}", "---"]
    return "\n".join(lines)


def build_knowledge_report(
    suppliers: Sequence[Any],
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
    generated_at: Optional[datetime] = None,
    top_fraction: float = 0.1,
) -> str:
    generated_at = generated_at or utcnow()
    ranked = sort_suppliers(suppliers, SortState(), criteria)
    top = top_performers(ranked, top_fraction)
    active = status_counts(suppliers).get("active", 0)
    average = _average(suppliers)

    out: List[str] = [
        "# CHANAKYA Supplier Management System Knowledge Base",
        "",
        "## OVERVIEW",
        f"Total Suppliers: {len(suppliers)}",
        f"Active Suppliers: {active}",
        f"Average Overall Score: {format_score(average)}",
        f"Top Performers (Top {int(top_fraction * 100)}%): {len(top)}",
        "",
        f"## TOP PERFORMING SUPPLIERS (Top {int(top_fraction * 100)}%)",
    ]
    for index, s in enumerate(top, start=1):
        out += ["", _performer_block(index, s, criteria)]

    by_industry = _group(ranked, lambda s: s.industry or "Unknown")
    out += ["", "## SUPPLIERS BY INDUSTRY"]
    for industry, members in by_industry.items():
        best = members[0]
        out += [
            "",
            f"### {industry} ({len(members)} suppliers)",
            f"Average Score: {format_score(_average(members))}%",
            f"Top Supplier: {best.name} ({format_score(overall_score(best.raw_scores, criteria))}%)",
        ]
        out += [
            f"- {m.name}: {format_score(overall_score(m.raw_scores, criteria))}% ({_status(m)})"
            for m in members
        ]

    out += ["", "## SUPPLIERS BY STATUS"]
    for status, members in _group(ranked, _status).items():
        out += ["", f"### {status.upper()} ({len(members)} suppliers)"]
        out += [
            f"- {m.name}: {format_score(overall_score(m.raw_scores, criteria))}% ({m.industry})"
            for m in members
        ]

    out += ["", "## EVALUATION CRITERIA DEFINITIONS"]
    for index, c in enumerate(criteria, start=1):
        out.append(f"{index}. **{c.name} ({c.weight:g}% weight)**")
        out += [f"   - {sub.name}: {sub.description}" for sub in c.sub_criteria]
        out.append("")

    out.append("## DETAILED SUPPLIER DATABASE")
    for s in ranked:
        out += ["", _detail_block(s, criteria)]

    best_industry = max(by_industry.items(), key=lambda kv: _average(kv[1]))[0] if by_industry else "No data"
    if top:
        best_line = f"{top[0].name} with {format_score(overall_score(top[0].raw_scores, criteria))}% overall score"
    else:
        best_line = "No scored suppliers yet"
    out += [
        "",
        "## COMMON QUERIES AND ANSWERS",
        f'- "Who is the best supplier?" - {best_line}',
        f'- "Which industry has the best suppliers?" - {best_industry} industry',
        f'- "How many active suppliers?" - {active} out of {len(suppliers)} suppliers',
        f'- "What\'s the average supplier score?" - {format_score(average)}%',
        "",
        f"This knowledge base was last updated: {generated_at.isoformat()}",
    ]
    return "\n".join(out) + "\n"


def build_context_summary(
    suppliers: Sequence[Any],
    current_view: str = "grid",
    recent_activity: Optional[Sequence[str]] = None,
    available_views: Sequence[str] = ("grid", "matrix", "analytics", "criteria"),
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> str:
    """Short system context handed to the voice assistant"""
    counts = status_counts(suppliers)
    lines = [
        "SUPPLIER MANAGEMENT SYSTEM CONTEXT:",
        "",
        "CURRENT STATUS:",
        f"- Total Suppliers: {len(suppliers)}",
        f"- Active Suppliers: {counts.get('active', 0)}",
        f"- Pending Suppliers: {counts.get('pending', 0)}",
        f"- Rejected Suppliers: {counts.get('rejected', 0)}",
        f"- Current View: {current_view}",
        "",
        "SUPPLIERS LIST:",
    ]
    for s in suppliers:
        lines.append(
            f"- {s.name} ({s.industry}) - Status: {_status(s)}, "
            f"Overall: {format_score(overall_score(s.raw_scores, criteria))}/100"
        )

    lines += ["", "EVALUATION CRITERIA:", ", ".join(c.name for c in criteria), "", "AVERAGE SCORES:"]
    for c in criteria:
        values = [category_score(s.raw_scores, c) for s in suppliers]
        avg = sum(values) / len(values) if values else 0.0
        lines.append(f"{c.name}: {format_score(avg)}/100")

    lines += ["", "AVAILABLE VIEWS:", ", ".join(available_views), "", "RECENT ACTIVITY:"]
    lines += list(recent_activity or ["None"])
    return "\n".join(lines)


class KnowledgeSyncClient:
    """Pushes the knowledge report to a remote knowledge-base endpoint"""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url if url is not None else settings.KNOWLEDGE_SYNC_URL
        self.api_key = api_key if api_key is not None else settings.KNOWLEDGE_SYNC_API_KEY
        self.timeout = timeout or settings.KNOWLEDGE_SYNC_TIMEOUT
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.url)

    async def push(self, text: str, title: Optional[str] = None) -> Dict[str, Any]:
        if not self.is_configured:
            raise PersistenceError("Knowledge sync not configured: KNOWLEDGE_SYNC_URL is not set")

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["xi-api-key"] = self.api_key

        body = {
            "text": text,
            "title": title or settings.KNOWLEDGE_BASE_TITLE,
            "description": "Complete supplier evaluation and management knowledge base",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=body, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Knowledge sync failed: {e}")
            raise PersistenceError(f"Knowledge sync failed: {e}", cause=e) from e

        logger.info(f"Synced knowledge base ({len(text)} chars) to {self.url}")
        try:
            return response.json()
        except ValueError:
            return {"status_code": response.status_code}
