# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: eCourts endpoints - CNR lookup, advocate search, advanced search,
consumer-forum lookup.
Every response is marked ``Cache-Control: no-store``; case data is always live.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from courtdesk.core.dependencies import get_ecourts_service
from courtdesk.core.logging import get_logger
from courtdesk.schemas import AdvocateSearchRequest
from courtdesk.services.ecourts_provider import ProviderNotConfiguredError
from courtdesk.services.ecourts_service import CaseSearchError, ECourtsService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/ecourts", tags=["eCourts"])

NO_STORE = {"Cache-Control": "no-store"}


def _reply(status_code: int, content: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=NO_STORE)


def _failure(status_code: int, error: str, message: str) -> JSONResponse:
    return _reply(status_code, {"success": False, "error": error, "message": message})


def _not_configured(exc: ProviderNotConfiguredError) -> JSONResponse:
    return _failure(503, "PROVIDER_NOT_CONFIGURED", str(exc))


@router.post("/cnr")
async def lookup_cnr(
    request: Request,
    service: ECourtsService = Depends(get_ecourts_service),
):
    """Relay a CNR lookup to the eCourts provider."""
    try:
        body = await request.json()
    except ValueError as exc:
        logger.error("CNR lookup body unreadable: %s", exc)
        return _failure(500, "SERVER_ERROR", str(exc) or "Unknown server error")
    if body is None:
        return _failure(500, "SERVER_ERROR", "Cannot read 'cnr' from a null request body")
    cnr = body.get("cnr") if isinstance(body, dict) else None
    if not cnr:
        return _failure(400, "MISSING_CNR", "CNR number is required")
    if not isinstance(cnr, str):
        cnr = str(cnr)

    try:
        result = await service.lookup_cnr(cnr)
    except ProviderNotConfiguredError as exc:
        logger.error("CNR lookup refused: %s", exc)
        return _not_configured(exc)
    except Exception as exc:
        logger.error("CNR lookup failed", exc_info=True, extra={"cnr": cnr})
        return _failure(500, "SERVER_ERROR", str(exc) or "Unknown server error")
    return _reply(200, result)


async def _run_advocate_search(service: ECourtsService, params: AdvocateSearchRequest) -> JSONResponse:
    try:
        result = await service.search_advocate(
            search_type=params.search_type or "number",
            court_type=params.court_type or "district",
            advocate_number=params.advocate_number,
            advocate_name=params.advocate_name,
            state=params.state or "KAR",
            year=params.year or "2021",
            complex_id=params.complex or "bangalore",
        )
    except CaseSearchError as exc:
        return _reply(exc.status_code, exc.as_dict())
    except ProviderNotConfiguredError as exc:
        return _not_configured(exc)
    except Exception as exc:
        logger.error("Advocate search failed", exc_info=True)
        return _failure(500, "INTERNAL_ERROR", str(exc) or "Advocate search failed")
    return _reply(200, result)


@router.get("/advocate")
async def advocate_search(
    search_type: str = Query(default="number", alias="searchType"),
    court_type: str = Query(default="district", alias="courtType"),
    advocate_number: Optional[str] = Query(default=None, alias="advocateNumber"),
    advocate_name: Optional[str] = Query(default=None, alias="advocateName"),
    state: str = Query(default="KAR"),
    year: str = Query(default="2021"),
    complex_id: str = Query(default="bangalore", alias="complex"),
    service: ECourtsService = Depends(get_ecourts_service),
):
    """Find the first case argued by an advocate (by enrolment number or name)."""
    params = AdvocateSearchRequest(
        searchType=search_type,
        courtType=court_type,
        advocateNumber=advocate_number,
        advocateName=advocate_name,
        state=state,
        year=year,
        complex=complex_id,
    )
    return await _run_advocate_search(service, params)


@router.post("/advocate")
async def advocate_search_post(
    request: Request,
    service: ECourtsService = Depends(get_ecourts_service),
):
    try:
        body = await request.json()
    except ValueError:
        return _failure(400, "INVALID_JSON", "Request body must be JSON")
    try:
        params = AdvocateSearchRequest.model_validate(body if isinstance(body, dict) else {})
    except ValidationError as exc:
        return _failure(400, "INVALID_PARAMETERS", str(exc))
    return await _run_advocate_search(service, params)


@router.get("/advanced-search")
async def advanced_search(
    court_type: str = Query(default="district", alias="courtType"),
    search_type: str = Query(default="cnr", alias="searchType"),
    cnr_number: Optional[str] = Query(default=None, alias="cnrNumber"),
    cnr: Optional[str] = Query(default=None),
    party_name: Optional[str] = Query(default=None, alias="partyName"),
    state: Optional[str] = Query(default=None),
    district: Optional[str] = Query(default=None),
    complex_id: Optional[str] = Query(default=None, alias="complex"),
    case_stage: Optional[str] = Query(default=None, alias="caseStage"),
    year: Optional[str] = Query(default=None),
    advocate_name: Optional[str] = Query(default=None, alias="advocateName"),
    advocate_number: Optional[str] = Query(default=None, alias="advocateNumber"),
    filing_number: Optional[str] = Query(default=None, alias="filingNumber"),
    service: ECourtsService = Depends(get_ecourts_service),
):
    """Search district-court cases by CNR, party, advocate or filing number."""
    try:
        result = await service.advanced_search(
            court_type=court_type,
            search_type=search_type,
            cnr_number=cnr_number or cnr,
            party_name=party_name,
            state=state,
            district=district,
            complex_id=complex_id,
            case_stage=case_stage,
            year=year,
            advocate_name=advocate_name,
            advocate_number=advocate_number,
            filing_number=filing_number,
        )
    except CaseSearchError as exc:
        return _reply(exc.status_code, exc.as_dict())
    except ProviderNotConfiguredError as exc:
        return _not_configured(exc)
    except Exception as exc:
        logger.error("Advanced search failed", exc_info=True)
        return _failure(500, "INTERNAL_ERROR", str(exc) or "Advanced search failed")
    return _reply(200, result)


async def _run_consumer_search(
    service: ECourtsService,
    case_number: Any,
    state: Optional[str] = None,
    year: Any = None,
    case_type: Optional[str] = None,
) -> JSONResponse:
    try:
        result = await service.consumer_forum_case(
            case_number, state=state, year=year, case_type=case_type,
        )
    except CaseSearchError as exc:
        return _reply(exc.status_code, exc.as_dict())
    except ProviderNotConfiguredError as exc:
        return _not_configured(exc)
    except Exception as exc:
        logger.error("Consumer forum lookup failed", exc_info=True)
        return _failure(
            500, "INTERNAL_ERROR",
            str(exc) or "An unexpected error occurred while searching consumer forum cases",
        )
    return _reply(200, result)


@router.post("/consumer-forum")
async def consumer_forum_case(
    request: Request,
    service: ECourtsService = Depends(get_ecourts_service),
):
    """Look up a consumer-forum case by case number, trying fallback endpoints."""
    try:
        body = await request.json()
    except ValueError as exc:
        return _failure(500, "INTERNAL_ERROR", str(exc) or "Request body must be JSON")
    if body is None:
        return _failure(500, "INTERNAL_ERROR", "Cannot read 'caseNumber' from a null request body")
    if not isinstance(body, dict):
        body = {}
    return await _run_consumer_search(
        service,
        body.get("caseNumber"),
        state=body.get("state"),
        year=body.get("year"),
        case_type=body.get("caseType"),
    )


@router.get("/consumer-forum")
async def consumer_forum_case_get(
    case_number: Optional[str] = Query(default=None, alias="caseNumber"),
    service: ECourtsService = Depends(get_ecourts_service),
):
    if not case_number:
        return _failure(400, "INVALID_REQUEST", "Case number is required as query parameter")
    return await _run_consumer_search(service, case_number)
