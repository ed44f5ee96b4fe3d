# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: eCourts provider client - Kleopatra court API over httpx.

Every public call returns a result dict ``{success, data?, error?, message?}``.
Transport failures become ``success: False`` results; only programming errors
propagate to the caller.
"""

import re
import time
from typing import Any, Optional

import httpx

from courtdesk.core.config import settings
from courtdesk.core.logging import get_logger
from courtdesk.metrics.prometheus import PROVIDER_LATENCY
from courtdesk.services.case_mapper import has_case_fields, map_provider_case

logger = get_logger(__name__)

CNR_PATTERN = re.compile(r"^[A-Za-z0-9\-]{16}$")

CASE_PATHS: dict[str, str] = {
    "district": "/api/core/live/district-court/case",
    "high": "/api/core/live/high-court/case",
    "supreme": "/api/core/live/supreme-court/case",
    "nclt": "/api/core/live/nclt/case",
    "consumer": "/api/core/live/consumer-forum/case",
}
PARTY_SEARCH_PATHS: dict[str, str] = {
    "district": "/api/core/live/district-court/search/party",
    "high": "/api/core/live/high-court/search/party",
    "supreme": "/api/core/live/supreme-court/search/party",
    "nclt": "/api/core/live/national-company-law-tribunal/search/party",
    "cat": "/api/core/live/central-administrative-tribunal/search-party",
    "consumer": "/api/core/live/consumer-forum/search/party",
}
FILING_SEARCH_PATHS: dict[str, str] = {
    "district": "/api/core/live/district-court/search/filing",
    "high": "/api/core/live/high-court/search/filing",
    "supreme": "/api/core/live/supreme-court/case",
    "nclt": "/api/core/live/national-company-law-tribunal/filing-number",
    "cat": "/api/core/live/central-administrative-tribunal/case-number",
    "consumer": "/api/core/live/consumer-forum/case",
}
ADVOCATE_NAME_PATH = "/api/core/live/district-court/search/advocate"
ADVOCATE_NUMBER_PATH = "/api/core/live/district-court/search/advocate-number"
CONSUMER_CASE_PATH = "/api/core/live/consumer-forum/case"
CONSUMER_FALLBACK_PATHS = (
    "/api/core/static/consumer-forum/search",
    "/v17/cases/search",
    "/api/core/live/district-court/search/case-number",
)
CONSUMER_FALLBACK_TIMEOUT = 60.0

DEFAULT_STATE = "KAR"
DEFAULT_YEAR = "2021"
DEFAULT_CONSUMER_YEAR = 2025
DEFAULT_DISTRICT = "bangalore"


class ProviderNotConfiguredError(RuntimeError):
    """No API key is configured for the eCourts provider."""


def _failure(error: str, message: str, **extra: Any) -> dict[str, Any]:
    result = {"success": False, "error": error, "message": message}
    result.update(extra)
    return result


def _extract_cases(payload: Any) -> list[dict[str, Any]]:
    """Pull case payloads out of a list, a ``cases`` wrapper, or a single case."""
    if isinstance(payload, list):
        return [c for c in payload if isinstance(c, dict)]
    if not isinstance(payload, dict):
        return []
    if payload.get("cases"):
        cases = payload["cases"]
        cases = cases if isinstance(cases, list) else [cases]
        return [c for c in cases if isinstance(c, dict)]
    if payload.get("cnr") or payload.get("case_number"):
        return [payload]
    return []


class ECourtsProvider:
    """Async client for the third-party eCourts data provider."""

    def __init__(
        self,
        api_key: str,
        provider: str = "third_party",
        timeout: float = 120.0,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not api_key:
            raise ProviderNotConfiguredError("eCourts API key is not configured")
        self.provider = provider
        self.timeout = timeout
        self.base_url = (base_url or settings.COURT_API_BASE).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "ECourtsProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(
        self, operation: str, path: str, body: dict[str, Any], timeout: Optional[float] = None
    ) -> Any:
        start = time.monotonic()
        options = {"timeout": timeout} if timeout is not None else {}
        try:
            resp = await self._client.post(path, json=body, **options)
            resp.raise_for_status()
            return resp.json()
        finally:
            PROVIDER_LATENCY.labels(operation=operation).observe(time.monotonic() - start)

    # ── Case by CNR ──

    async def get_case_by_cnr(self, cnr: str, court_type: str = "district") -> dict[str, Any]:
        if not isinstance(cnr, str) or not CNR_PATTERN.fullmatch(cnr):
            logger.info("Invalid CNR format", extra={"cnr": str(cnr)})
            return _failure(
                "INVALID_CNR",
                "CNR must be exactly 16 characters and contain only letters, digits, and hyphens",
            )
        if self.provider != "third_party":
            return _failure("INVALID_PROVIDER", "Invalid provider specified")

        path = CASE_PATHS.get(court_type, CASE_PATHS["district"])
        logger.info("Fetching case", extra={"cnr": cnr, "court_type": court_type})
        try:
            payload = await self._post("case_by_cnr", path, {"cnr": cnr})
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Court API case lookup failed: %s", exc, extra={"cnr": cnr})
            payload = None

        try:
            if has_case_fields(payload):
                return {"success": True, "data": map_provider_case(payload, cnr)}
            if isinstance(payload, list) and payload and isinstance(payload[0], dict):
                return {"success": True, "data": map_provider_case(payload[0], cnr)}
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Court API case payload unreadable: %s", exc, extra={"cnr": cnr})

        return _failure(
            "KLEOPATRA_API_ERROR",
            "Kleopatra API is not accessible. Please check API key.",
            requiresManual=True,
        )

    # ── Searches ──

    async def _search(
        self,
        operation: str,
        path: str,
        body: dict[str, Any],
        empty_message: str,
        reraise_statuses: tuple[int, ...] = (),
    ) -> dict[str, Any]:
        logger.info("Court API search", extra={"operation": operation, "path": path})
        try:
            payload = await self._post(operation, path, body)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning(
                "Court API search rejected",
                extra={"operation": operation, "status_code": status},
            )
            if status in reraise_statuses:
                raise
            return _failure("SEARCH_ERROR", str(exc))
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Court API search failed: %s", exc, extra={"operation": operation})
            return _failure("SEARCH_ERROR", str(exc) or f"{operation} failed")

        try:
            cases = [map_provider_case(c, str(c.get("cnr") or "")) for c in _extract_cases(payload)]
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Court API search payload unreadable: %s", exc, extra={"operation": operation})
            return _failure("SEARCH_ERROR", f"{operation} returned an unreadable payload")
        if not cases:
            return _failure("NO_RESULTS", empty_message)
        return {"success": True, "data": cases, "total": len(cases)}

    async def search_by_party_name(
        self,
        party_name: str,
        court_type: str = "district",
        year: Optional[str] = None,
        stage: str = "BOTH",
        court_id: Optional[str] = None,
        bench_id: Optional[str] = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "name": party_name,
            "stage": stage or "BOTH",
            "year": year or DEFAULT_YEAR,
            "districtId": court_id or DEFAULT_DISTRICT,
        }
        if court_type == "supreme":
            body["type"] = "ANY"
        elif court_type in ("high", "nclt", "cat") and bench_id:
            body["benchId"] = bench_id
            if court_type == "nclt":
                body["partyType"] = "PETITIONER"
            elif court_type == "cat":
                body["type"] = "BOTH"
        path = PARTY_SEARCH_PATHS.get(court_type, PARTY_SEARCH_PATHS["district"])
        return await self._search(
            "party_search", path, body, "No cases found for the given party name"
        )

    async def search_by_advocate(
        self,
        advocate_name: str,
        court_type: str = "district",
        stage: str = "BOTH",
        court_id: Optional[str] = None,
    ) -> dict[str, Any]:
        body = {
            "advocate": {"name": advocate_name},
            "stage": stage or "BOTH",
            "districtId": court_id or DEFAULT_DISTRICT,
        }
        fallback_statuses = (400, 404) if court_type == "district" else ()
        try:
            return await self._search(
                "advocate_search", ADVOCATE_NAME_PATH, body,
                "No cases found for the given advocate name",
                reraise_statuses=fallback_statuses,
            )
        except httpx.HTTPStatusError:
            logger.info("Advocate search rejected, falling back to party search: %s", advocate_name)
            return await self.search_by_party_name(
                advocate_name, court_type, stage=stage, court_id=court_id
            )

    async def search_by_advocate_number(
        self,
        advocate_number: str,
        court_type: str = "district",
        state_code: Optional[str] = None,
        year: Optional[str] = None,
        court_id: Optional[str] = None,
    ) -> dict[str, Any]:
        body = {
            "search": {
                "State": state_code or DEFAULT_STATE,
                "number": advocate_number,
                "year": year or DEFAULT_YEAR,
            },
            "stage": "BOTH",
            "districtId": court_id or DEFAULT_DISTRICT,
        }
        return await self._search(
            "advocate_number_search", ADVOCATE_NUMBER_PATH, body,
            "No cases found for the given advocate number",
        )

    async def search_by_filing_number(
        self,
        filing_number: str,
        court_type: str = "district",
        filing_year: Optional[str] = None,
        court_id: Optional[str] = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "filingNumber": filing_number,
            "filingYear": filing_year or DEFAULT_YEAR,
            "districtId": court_id or DEFAULT_DISTRICT,
        }
        if court_type == "supreme":
            body["diaryNumber"] = filing_number
        elif court_type in ("cat", "consumer"):
            body["caseNumber"] = filing_number
        path = FILING_SEARCH_PATHS.get(court_type, FILING_SEARCH_PATHS["district"])
        return await self._search(
            "filing_search", path, body, "No cases found for the given filing number"
        )

    # ── Consumer forum ──

    async def get_consumer_forum_case(
        self,
        case_number: str,
        state: Optional[str] = None,
        year: Any = None,
        case_type: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Look a consumer-forum case up by case number.

        The live consumer-forum endpoint is tried first; if it fails, each
        fallback endpoint is tried in turn with a shorter timeout. The first
        successful payload is returned as-is under ``data``.
        """
        body = {
            "caseNumber": case_number,
            "state": state or DEFAULT_STATE,
            "year": year or DEFAULT_CONSUMER_YEAR,
            "caseType": case_type or "CONSUMER",
        }
        primary = f"{self.base_url}{CONSUMER_CASE_PATH}"
        logger.info("Consumer forum lookup", extra={"case_number": case_number})
        try:
            payload = await self._post("consumer_forum_case", CONSUMER_CASE_PATH, body)
            return {
                "success": True,
                "data": payload,
                "source": "kleopatra_consumer_forum",
                "endpoint": primary,
            }
        except (httpx.HTTPError, ValueError) as exc:
            primary_error = str(exc) or type(exc).__name__
            logger.warning(
                "Consumer forum lookup failed, trying fallbacks: %s", primary_error,
                extra={"case_number": case_number},
            )

        fallback_body = {
            "caseNumber": case_number,
            "mode": "caseNumber",
            "caseType": "CONSUMER",
            "stateCode": state or DEFAULT_STATE,
            "year": year or DEFAULT_CONSUMER_YEAR,
        }
        for path in CONSUMER_FALLBACK_PATHS:
            try:
                payload = await self._post(
                    "consumer_forum_fallback", path, fallback_body, timeout=CONSUMER_FALLBACK_TIMEOUT
                )
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning(
                    "Consumer forum fallback failed: %s", exc,
                    extra={"case_number": case_number, "path": path},
                )
                continue
            return {
                "success": True,
                "data": payload,
                "source": "kleopatra_fallback",
                "endpoint": f"{self.base_url}{path}",
            }

        return _failure(
            "CONSUMER_FORUM_NOT_FOUND",
            f'Consumer case "{case_number}" not found in any available database',
            details={
                "caseNumber": case_number,
                "attemptedEndpoints": [primary] + [f"{self.base_url}{p}" for p in CONSUMER_FALLBACK_PATHS],
                "primaryError": primary_error,
            },
        )
