"""
api_server.py - FastAPI Backend for the FTL Compliance Checker
===============================================================

RESTful API exposing the roster parsers and the EASA FTL compliance engine.

Endpoints:
- POST /api/check-compliance - Evaluate duty periods, get per-day results
- GET  /api/ftl-limits - Rule tables in force
- POST /api/parse-roster - Roster text to duty periods
- POST /api/parse-roster-pdf - Roster PDF upload to duty periods
- POST /api/parse-flight-data - Operations flight board to flights
- POST /api/standby-preview - Flights a standby crew member could be called for

Usage:
    uvicorn api.api_server:app --reload --host 0.0.0.0 --port 8000
"""

import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from core import FTLComplianceChecker, summarize_results, validate_flight_data
from core.time_utils import is_valid_clock
from models.data_models import DutyPeriod, StandbyType
from parsers.flight_board_parser import (
    FLIGHT_BOARD_FORMAT_EXAMPLE,
    calculate_standby_stats,
    get_available_flights,
    parse_flight_board,
)
from parsers.format_detection import CALENDAR_GRID, FORMAT_EXAMPLES, parse_roster
from parsers.pdf_roster_parser import (
    PDF_ROSTER_FORMAT_EXAMPLE,
    parse_pdf_roster,
    validate_pdf_bytes,
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
DEFAULT_TIMEZONE = os.environ.get("FTL_DEFAULT_TIMEZONE", "Europe/Vienna")

# ============================================================================
# FASTAPI APP INITIALIZATION
# ============================================================================

app = FastAPI(
    title="EASA FTL Compliance API",
    description="Roster parsing and EASA FTL (EU 965/2012) compliance checks",
    version=API_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "*"  # For development - restrict in production!
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

checker = FTLComplianceChecker()

# ============================================================================
# REQUEST MODELS
# ============================================================================

class ComplianceRequest(BaseModel):
    flight_data: Any = None  # list of duty period dicts, shape checked by the validator
    date_scope: str = "all"
    language: str = "en"


class RosterTextRequest(BaseModel):
    roster_text: Optional[str] = None
    language: str = "en"
    is_utc: bool = False
    default_timezone: str = DEFAULT_TIMEZONE


class FlightBoardRequest(BaseModel):
    flight_text: Optional[str] = None
    base_airport: str = "VIE"
    timezone: str = DEFAULT_TIMEZONE


class StandbyPreviewRequest(BaseModel):
    flights: Optional[List[Dict[str, Any]]] = None
    standby_start: Optional[str] = None
    standby_end: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE
    standby_type: StandbyType = StandbyType.HOME


def _bad_request(error: str, details: List[str], **extra) -> HTTPException:
    return HTTPException(status_code=400, detail={"error": error, "details": details, **extra})


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    return {
        "status": "ok",
        "service": "EASA FTL Compliance API",
        "version": API_VERSION,
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "OK",
        "timestamp": datetime.now().isoformat(),
        "environment": os.environ.get("ENVIRONMENT", "development"),
        "version": API_VERSION,
    }


@app.post("/api/check-compliance")
async def check_compliance(request: ComplianceRequest):
    """
    Validate duty periods, then evaluate every in-scope day.

    Returns per-day results plus day counts by status.
    """
    validation = validate_flight_data(request.flight_data)
    if not validation.is_valid:
        raise _bad_request("Invalid flight data", validation.errors)

    try:
        duties = [DutyPeriod.from_dict(d) for d in request.flight_data]
        results = checker.check(duties, request.date_scope, request.language)
    except Exception as e:
        logger.exception("Compliance check failed")
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to check compliance", "details": str(e)},
        )

    return {
        "success": True,
        "compliance_results": [r.to_dict() for r in results],
        "summary": summarize_results(results),
    }


@app.get("/api/ftl-limits")
async def get_ftl_limits(language: str = "en"):
    """Rule tables the engine evaluates against"""
    return {"limits": checker.limits.to_dict(), "language": language}


@app.post("/api/parse-roster")
async def parse_roster_text(request: RosterTextRequest):
    """
    Parse pasted roster text.

    The layout is detected automatically; calendar-grid exports are always
    read as UTC.
    """
    if not request.roster_text or not isinstance(request.roster_text, str):
        raise _bad_request("Invalid roster text", ["Roster text is required and must be a string"])

    try:
        result = parse_roster(request.roster_text, request.is_utc, request.default_timezone)
    except Exception as e:
        logger.exception("Roster parsing failed")
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to parse roster text", "details": str(e)},
        )

    parser_used = result.parser_used
    if not result.success:
        raise _bad_request(
            "Failed to parse roster text",
            result.errors,
            example=FORMAT_EXAMPLES[parser_used],
            parser_used=parser_used,
        )

    utc_applied = parser_used == CALENDAR_GRID or request.is_utc
    return {
        "success": True,
        "duty_periods": [d.to_dict() for d in result.duty_periods],
        "summary": result.summary,
        "message": (
            f"Successfully parsed {len(result.duty_periods)} duty periods with "
            f"{result.summary.get('total_flights', 0)} flights using {parser_used} parser"
        ),
        "timezone_info": {
            "is_utc": utc_applied,
            "default_timezone": request.default_timezone,
            "conversion_applied": utc_applied,
        },
        "parser_used": parser_used,
    }


@app.post("/api/parse-roster-pdf")
async def parse_roster_pdf(
    file: UploadFile = File(...),
    is_utc: bool = Form(True),
    default_timezone: str = Form(DEFAULT_TIMEZONE),
):
    """Upload a roster PDF; its text goes through the same format detection"""
    content = await file.read()
    ok, error = validate_pdf_bytes(content)
    if not ok:
        raise _bad_request("Invalid PDF file", [error])

    result = parse_pdf_roster(content, is_utc=is_utc, default_timezone=default_timezone)
    if not result.success:
        raise _bad_request(
            "Failed to parse PDF roster",
            result.errors,
            example=PDF_ROSTER_FORMAT_EXAMPLE,
        )

    return {
        "success": True,
        "duty_periods": [d.to_dict() for d in result.duty_periods],
        "summary": result.summary,
        "message": (
            f"Successfully parsed {len(result.duty_periods)} duty periods from "
            f"{file.filename or 'PDF'}"
        ),
        "parser_used": result.parser_used,
    }


@app.post("/api/parse-flight-data")
async def parse_flight_data(request: FlightBoardRequest):
    if not request.flight_text or not isinstance(request.flight_text, str):
        raise _bad_request(
            "Invalid flight data text",
            ["Flight data text is required and must be a string"],
            example=FLIGHT_BOARD_FORMAT_EXAMPLE,
        )

    result = parse_flight_board(request.flight_text, request.base_airport, request.timezone)
    if not result.success:
        raise _bad_request(
            "Failed to parse flight data",
            result.errors,
            example=FLIGHT_BOARD_FORMAT_EXAMPLE,
        )

    return {
        "success": True,
        "flights": [f.to_dict() for f in result.flights],
        "summary": result.summary,
        "message": f"Successfully parsed {len(result.flights)} flights",
    }


@app.post("/api/standby-preview")
async def standby_preview(request: StandbyPreviewRequest):
    """Flights whose earliest call-out falls inside the standby window"""
    if request.flights is None:
        raise _bad_request("Invalid flights data", ["Flights array is required"])
    if not request.standby_start or not request.standby_end:
        raise _bad_request(
            "Invalid standby times",
            ["Both standby_start and standby_end times are required (HH:MM format)"],
        )
    if not is_valid_clock(request.standby_start) or not is_valid_clock(request.standby_end):
        raise _bad_request(
            "Invalid time format",
            ["Times must be in HH:MM format (e.g., 08:00, 16:30)"],
        )

    try:
        available = get_available_flights(
            request.flights,
            request.standby_start,
            request.standby_end,
            request.timezone,
            request.standby_type,
        )
        stats = calculate_standby_stats(available, request.standby_start, request.standby_end)
    except Exception as e:
        logger.exception("Standby preview failed")
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to process standby preview", "details": str(e)},
        )

    return {
        "success": True,
        "available_flights": [f.to_dict() for f in available],
        "stats": stats,
        "standby_period": {
            "start": request.standby_start,
            "end": request.standby_end,
            "duration": stats["standby_duration"],
            "timezone": request.timezone,
        },
        "message": f"Found {len(available)} flights available during standby period",
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    port = int(os.environ.get("PORT", 8000))

    print("=" * 70)
    print("EASA FTL COMPLIANCE API SERVER")
    print("=" * 70)
    print()
    print(f"API will be available at: http://localhost:{port}")
    print(f"API docs at: http://localhost:{port}/docs")
    print()

    uvicorn.run(app, host="0.0.0.0", port=port)
