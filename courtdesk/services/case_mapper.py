# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Case mapping - pure computation, no side effects.

``map_provider_case`` normalises a court-API payload into a case record;
``to_dashboard_case`` flattens a case record into the shape the case list
screens store.
"""

import re
import uuid
from datetime import date, datetime, timezone
from typing import Any, Optional

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
)
_EPOCH = date(1970, 1, 1)


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _records(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def sanitize_html(html: Optional[str]) -> str:
    """Strip tags; ``<br>`` becomes a space and whitespace is collapsed."""
    if not html:
        return ""
    text = _BR_RE.sub(" ", str(html))
    text = _TAG_RE.sub("", text)
    return _WS_RE.sub(" ", text).strip()


def _parse_date(value: str) -> Optional[date]:
    iso = value.replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(iso).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def format_date(value: Optional[str]) -> str:
    """
    Normalise a provider date to ``YYYY-MM-DD``.

    Empty input and the 1970-01-01 placeholder the provider uses for
    "no date" give ``""``; anything unparsable is returned unchanged.
    """
    if not value:
        return ""
    value = str(value).strip()
    parsed = _parse_date(value)
    if parsed is None:
        return value
    if parsed == _EPOCH:
        return ""
    return parsed.isoformat()


def has_case_fields(payload: Any) -> bool:
    """True when a provider payload looks like a case rather than an ack."""
    if not isinstance(payload, dict) or not payload:
        return False
    if isinstance(payload.get("data"), dict):
        payload = payload["data"]
    return any(payload.get(k) for k in ("title", "parties", "cnr", "case_details"))


def map_provider_case(api_data: dict[str, Any], cnr: str) -> dict[str, Any]:
    """Map a Kleopatra court-API case payload to a case record.

    Sections of the wrong shape (a list where an object belongs, a string
    where a list belongs) read as empty.
    """
    data = _mapping(api_data.get("data")) or api_data
    details = _mapping(data.get("details"))
    status = _mapping(data.get("status"))
    parties = _mapping(data.get("parties"))

    registration_number = details.get("registrationNumber") or data.get("registrationNumber") or ""

    formatted_parties = [
        {"type": "PLAINTIFF", "name": name} for name in _records(parties.get("petitioners"))
    ] + [
        {"type": "DEFENDANT", "name": name} for name in _records(parties.get("respondents"))
    ]
    formatted_advocates = [
        {"name": name, "type": "Petitioner"} for name in _records(parties.get("petitionerAdvocates"))
    ] + [
        {"name": name, "type": "Respondent"} for name in _records(parties.get("respondentAdvocates"))
    ]

    hearing_history = [
        {
            "date": format_date(hearing.get("businessDate") or hearing.get("date") or ""),
            "purpose": hearing.get("purpose") or "Hearing",
            "judge": hearing.get("judge") or "Unknown Judge",
            "status": hearing.get("status") or "",
            "nextDate": format_date(hearing.get("nextDate") or ""),
            "url": hearing.get("url") or "",
        }
        for hearing in _records(data.get("history"))
        if isinstance(hearing, dict)
    ]
    orders = [
        {
            "number": order.get("number") or index + 1,
            "name": order.get("name") or f"Order {index + 1}",
            "date": format_date(order.get("date") or ""),
            "url": order.get("url") or "",
        }
        for index, order in enumerate(o for o in _records(data.get("orders")) if isinstance(o, dict))
    ]

    acts = _mapping(data.get("actsAndSections"))
    acts_and_sections = None
    if acts.get("acts") or acts.get("sections"):
        acts_and_sections = {"acts": acts.get("acts") or "", "sections": acts.get("sections") or ""}

    return {
        "cnr": cnr,
        "caseNumber": registration_number or f"REG-{cnr[-6:]}",
        "filingNumber": details.get("filingNumber") or "",
        "title": data.get("title") or "Unknown Case",
        "court": status.get("courtNumberAndJudge") or "Unknown Court",
        "courtLocation": data.get("courtLocation") or "",
        "hallNumber": data.get("hallNumber") or "",
        "caseType": details.get("type") or "CIVIL",
        "caseStatus": sanitize_html(status.get("caseStage") or "PENDING"),
        "filingDate": format_date(details.get("filingDate")),
        "lastHearingDate": format_date(status.get("lastHearingDate")),
        "nextHearingDate": format_date(status.get("nextHearingDate")),
        "parties": formatted_parties,
        "advocates": formatted_advocates,
        "judges": [],
        "hearingHistory": hearing_history,
        "orders": orders,
        "actsAndSections": acts_and_sections,
        "registrationNumber": registration_number,
        "registrationDate": format_date(details.get("registrationDate")),
        "firstHearingDate": format_date(status.get("firstHearingDate")),
        "decisionDate": format_date(status.get("decisionDate")),
        "natureOfDisposal": status.get("natureOfDisposal") or "",
        "caseDetails": {
            "subjectMatter": data.get("title") or "",
            "caseDescription": "",
            "reliefSought": "",
            "caseValue": None,
            "jurisdiction": "",
        },
    }


def _first_party(record: dict[str, Any], party_type: str) -> str:
    for party in record.get("parties") or []:
        if party.get("type") == party_type:
            return party.get("name") or ""
    return ""


def to_dashboard_case(record: dict[str, Any], court_type: str = "district") -> dict[str, Any]:
    """Flatten a case record into a new dashboard case entry."""
    now = datetime.now(timezone.utc).isoformat()
    court = record.get("court") or ""
    return {
        "id": str(uuid.uuid4()),
        "cnrNumber": record.get("cnr") or "",
        "caseNumber": record.get("registrationNumber") or record.get("filingNumber") or "",
        "filingNumber": record.get("filingNumber") or "",
        "title": record.get("title") or "",
        "petitionerName": _first_party(record, "PLAINTIFF"),
        "respondentName": _first_party(record, "DEFENDANT"),
        "court": court,
        "courtLocation": court,
        "hallNumber": "",
        "caseType": record.get("caseType") or "",
        "caseStatus": record.get("caseStatus") or "",
        "filingDate": record.get("filingDate") or "",
        "lastHearingDate": record.get("nextHearingDate") or "",
        "nextHearingDate": record.get("nextHearingDate") or "",
        "priority": "MEDIUM",
        "stage": record.get("caseStatus") or "",
        "subjectMatter": "",
        "reliefSought": "",
        "caseValue": 0,
        "jurisdiction": "",
        "advocates": [
            {"name": a.get("name", ""), "type": a.get("type", "")}
            for a in record.get("advocates") or []
        ],
        "judges": [{"name": court, "designation": "Judge", "court": court_type}] if court else [],
        "parties": [
            {
                "name": p.get("name", ""),
                "type": "PETITIONER" if p.get("type") == "PLAINTIFF" else "RESPONDENT",
            }
            for p in record.get("parties") or []
        ],
        "hearingHistory": list(record.get("hearingHistory") or []),
        "orders": list(record.get("orders") or []),
        "actsAndSections": record.get("actsAndSections") or {"acts": "", "sections": ""},
        "registrationNumber": record.get("registrationNumber") or "",
        "registrationDate": record.get("registrationDate") or "",
        "firstHearingDate": record.get("firstHearingDate") or "",
        "decisionDate": record.get("decisionDate") or "",
        "natureOfDisposal": record.get("natureOfDisposal") or "",
        "tags": [],
        "documents": [],
        "createdAt": now,
        "updatedAt": now,
    }
