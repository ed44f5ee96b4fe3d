# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: eCourts lookups - CNR relay, advocate search, advanced search,
consumer-forum case lookup.

Builds a provider client per call from the configured credential and
closes it afterwards. Search validation failures are raised as
``CaseSearchError`` carrying the HTTP status and a stable error code.
"""

from typing import Any, Callable, Optional

from courtdesk.core.config import settings
from courtdesk.core.logging import get_logger
from courtdesk.metrics.prometheus import CASE_SEARCHES, CNR_LOOKUPS
from courtdesk.services.case_mapper import to_dashboard_case
from courtdesk.services.ecourts_provider import ECourtsProvider, ProviderNotConfiguredError

logger = get_logger(__name__)

ProviderFactory = Callable[..., ECourtsProvider]

ADVANCED_SEARCH_TYPES = ("cnr", "party", "advocate", "advocateNumber", "filing")
CASE_STAGES = {"both": "BOTH", "pending": "PENDING", "disposed": "DISPOSED"}


class CaseSearchError(Exception):
    """A search that cannot produce a case; maps 1:1 onto an HTTP error."""

    def __init__(
        self, status_code: int, error: str, message: str, details: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = details

    def as_dict(self) -> dict[str, Any]:
        body = {"success": False, "error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


def _blank(value: Optional[str]) -> bool:
    return not value or not str(value).strip()


class ECourtsService:
    """Business logic in front of the eCourts provider client."""

    def __init__(self, provider_factory: ProviderFactory = ECourtsProvider) -> None:
        self._provider_factory = provider_factory

    def build_provider(self, timeout: float) -> ECourtsProvider:
        """Fail closed when no credential is configured."""
        api_key = settings.ecourts_api_key()
        if not api_key:
            raise ProviderNotConfiguredError("eCourts API key is not configured")
        return self._provider_factory(
            api_key=api_key,
            provider=settings.ECOURTS_PROVIDER,
            timeout=timeout,
        )

    # ── CNR ──

    async def lookup_cnr(self, cnr: str) -> dict[str, Any]:
        """
        Relay a CNR lookup. The provider's result is returned untouched,
        whatever its own ``success`` flag says; provider faults propagate.
        """
        try:
            provider = self.build_provider(settings.ECOURTS_TIMEOUT)
        except ProviderNotConfiguredError:
            CNR_LOOKUPS.labels(outcome="not_configured").inc()
            raise

        logger.info("CNR lookup", extra={"cnr": cnr})
        try:
            result = await provider.get_case_by_cnr(cnr)
        except Exception:
            CNR_LOOKUPS.labels(outcome="error").inc()
            raise
        finally:
            await provider.aclose()

        outcome = "success" if result.get("success") else "failed"
        CNR_LOOKUPS.labels(outcome=outcome).inc()
        logger.info("CNR lookup result", extra={"cnr": cnr, "outcome": outcome})
        return result

    # ── Advocate search ──

    async def search_advocate(
        self,
        search_type: str = "number",
        court_type: str = "district",
        advocate_number: Optional[str] = None,
        advocate_name: Optional[str] = None,
        state: str = "KAR",
        year: str = "2021",
        complex_id: str = "bangalore",
    ) -> dict[str, Any]:
        if search_type == "number" and not _blank(advocate_number):
            term_kind = "advocate number"
        elif search_type == "name" and not _blank(advocate_name):
            term_kind = "advocate name"
        else:
            CASE_SEARCHES.labels(search_type=f"advocate_{search_type}", outcome="invalid").inc()
            raise CaseSearchError(
                400, "INVALID_PARAMETERS",
                "Either advocateNumber or advocateName must be provided",
            )

        provider = self.build_provider(settings.ECOURTS_SEARCH_TIMEOUT)
        try:
            if search_type == "number":
                result = await provider.search_by_advocate_number(
                    advocate_number.strip(), court_type,
                    state_code=state, year=year, court_id=complex_id,
                )
            else:
                result = await provider.search_by_advocate(
                    advocate_name.strip(), court_type, stage="BOTH", court_id=complex_id,
                )
        finally:
            await provider.aclose()

        record = self._first_case(result, f"advocate_{search_type}", term_kind)
        CASE_SEARCHES.labels(search_type=f"advocate_{search_type}", outcome="found").inc()
        logger.info(
            "Advocate search completed",
            extra={"search_type": f"advocate_{search_type}", "court_type": court_type, "outcome": "found"},
        )
        return {
            "success": True,
            "data": to_dashboard_case(record, court_type),
            "message": f"Advocate {search_type} search completed successfully",
        }

    # ── Advanced search ──

    async def advanced_search(
        self,
        court_type: str = "district",
        search_type: str = "cnr",
        cnr_number: Optional[str] = None,
        party_name: Optional[str] = None,
        state: Optional[str] = None,
        district: Optional[str] = None,
        complex_id: Optional[str] = None,
        case_stage: Optional[str] = None,
        year: Optional[str] = None,
        advocate_name: Optional[str] = None,
        advocate_number: Optional[str] = None,
        filing_number: Optional[str] = None,
    ) -> dict[str, Any]:
        if court_type != "district":
            CASE_SEARCHES.labels(search_type=search_type, outcome="unsupported").inc()
            raise CaseSearchError(
                501, "COURT_NOT_SUPPORTED",
                f"Search functions for {court_type} court are not yet implemented. "
                "Currently only District Court search functions are available.",
            )
        if search_type not in ADVANCED_SEARCH_TYPES:
            CASE_SEARCHES.labels(search_type="unknown", outcome="invalid").inc()
            raise CaseSearchError(
                400, "UNSUPPORTED_SEARCH_TYPE",
                f"Unsupported search type: {search_type} for {court_type} court",
            )

        required = {
            "cnr": (cnr_number, "CNR Number is required for CNR lookup"),
            "party": (party_name, "Party Name is required for party search"),
            "advocate": (advocate_name, "Advocate Name is required for advocate search"),
            "advocateNumber": (advocate_number, "Advocate Number is required for advocate number search"),
            "filing": (filing_number, "Filing Number is required for filing search"),
        }
        term, missing_message = required[search_type]
        if _blank(term):
            CASE_SEARCHES.labels(search_type=search_type, outcome="invalid").inc()
            raise CaseSearchError(400, "MISSING_PARAMETER", missing_message)
        term = term.strip()

        provider = self.build_provider(settings.ECOURTS_TIMEOUT)
        try:
            if search_type == "cnr":
                result = await provider.get_case_by_cnr(term, court_type)
                if result.get("success") and result.get("data"):
                    result = {"success": True, "data": [result["data"]]}
            elif search_type == "party":
                result = await provider.search_by_party_name(
                    term, court_type, year=year,
                    stage=CASE_STAGES.get((case_stage or "both").lower(), "BOTH"),
                    court_id=complex_id,
                )
            elif search_type == "advocate":
                result = await provider.search_by_advocate(
                    term, court_type, stage="BOTH", court_id=complex_id,
                )
            elif search_type == "advocateNumber":
                result = await provider.search_by_advocate_number(
                    term, court_type, state_code=state, year=year, court_id=complex_id,
                )
            else:
                result = await provider.search_by_filing_number(
                    term, court_type, filing_year=year, court_id=complex_id,
                )
        finally:
            await provider.aclose()

        record = self._first_case(result, search_type, "search criteria")
        CASE_SEARCHES.labels(search_type=search_type, outcome="found").inc()
        logger.info(
            "Advanced search completed: %s", record.get("title"),
            extra={"search_type": search_type, "court_type": court_type, "outcome": "found"},
        )
        return {
            "success": True,
            "data": to_dashboard_case(record, court_type),
            "searchType": search_type,
            "courtType": court_type,
            "searchParams": {
                "cnrNumber": cnr_number,
                "partyName": party_name,
                "state": state,
                "district": district,
                "complex": complex_id,
                "caseStage": case_stage,
                "year": year,
                "advocateName": advocate_name,
                "advocateNumber": advocate_number,
                "filingNumber": filing_number,
            },
        }

    # ── Consumer forum ──

    async def consumer_forum_case(
        self,
        case_number: Any,
        state: Optional[str] = None,
        year: Any = None,
        case_type: Optional[str] = None,
    ) -> dict[str, Any]:
        """Fetch a consumer-forum case; the provider payload is passed through untouched."""
        if _blank(case_number):
            CASE_SEARCHES.labels(search_type="consumer_forum", outcome="invalid").inc()
            raise CaseSearchError(400, "INVALID_REQUEST", "Case number is required")

        provider = self.build_provider(settings.ECOURTS_TIMEOUT)
        try:
            result = await provider.get_consumer_forum_case(
                case_number, state=state, year=year, case_type=case_type,
            )
        finally:
            await provider.aclose()

        if not result.get("success"):
            CASE_SEARCHES.labels(search_type="consumer_forum", outcome="not_found").inc()
            raise CaseSearchError(404, result["error"], result["message"], result.get("details"))
        CASE_SEARCHES.labels(search_type="consumer_forum", outcome="found").inc()
        logger.info(
            "Consumer forum case found",
            extra={"case_number": case_number, "source": result.get("source"), "outcome": "found"},
        )
        return result

    @staticmethod
    def _first_case(result: dict[str, Any], search_type: str, term_kind: str) -> dict[str, Any]:
        cases = result.get("data") if result.get("success") else None
        if not cases:
            CASE_SEARCHES.labels(search_type=search_type, outcome="not_found").inc()
            raise CaseSearchError(
                404,
                result.get("error") or "NO_RESULTS",
                result.get("message") or f"No cases found for the given {term_kind}",
            )
        return cases[0]
