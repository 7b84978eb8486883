import logging
from typing import Any, List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

try:
    from ..data.qualtrics import CSVFormatError, parse_qualtrics_csv
    from ..tabulation.engine import ElectionEngine, create_engine
    from ..tabulation.errors import InvalidInput, UnknownMethod, ValidationFailed
    from ..tabulation.models import ElectionConfig
except ImportError:
    from data.qualtrics import CSVFormatError, parse_qualtrics_csv
    from tabulation.engine import ElectionEngine, create_engine
    from tabulation.errors import InvalidInput, UnknownMethod, ValidationFailed
    from tabulation.models import ElectionConfig

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ranked Choice Tabulator",
    description="Instant-runoff, STV and Borda count election tabulation",
)

# Global engine - methods are registered once here, before requests arrive
engine = create_engine()


def get_engine() -> ElectionEngine:
    return engine


def set_engine(new_engine: ElectionEngine):
    """Replace the engine serving requests (tests, custom methods)."""
    global engine
    engine = new_engine
    logger.info(f"Engine set with methods: {engine.get_available_methods()}")


# Candidates and ballots stay loosely typed so the ballot validator, not
# request parsing, reports every problem in a submission.
class ValidateRequest(BaseModel):
    method: str
    candidates: Any = None
    ballots: Any = None


class ElectionRequest(BaseModel):
    method: str
    candidates: Any = None
    ballots: Any = None
    seats: int = 1
    title: str = ""


class CSVRequest(BaseModel):
    content: str


@app.get("/api/health")
async def health():
    """Liveness check."""
    return {"status": "ok", "methods": get_engine().get_available_methods()}


@app.get("/api/methods")
async def get_methods() -> List[str]:
    """List registered voting methods."""
    return get_engine().get_available_methods()


@app.post("/api/validate")
async def validate_ballots(request: ValidateRequest):
    """Validate ballots for a method without running the election."""
    try:
        validation = get_engine().validate(
            request.method, request.candidates, request.ballots
        )
    except UnknownMethod:
        return {"valid": False, "errors": [f"Unknown method: {request.method}"]}
    return validation.to_dict()


@app.post("/api/elections")
async def run_election(request: ElectionRequest):
    """Validate and tabulate one election."""
    try:
        config = ElectionConfig(
            candidates=request.candidates,
            ballots=request.ballots,
            method=request.method,
            seats=request.seats,
            title=request.title,
        )
        result = get_engine().run_election(config)
    except UnknownMethod as e:
        logger.error(f"Election request for unknown method: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationFailed as e:
        logger.error(f"Election request failed validation: {len(e.errors)} error(s)")
        raise HTTPException(
            status_code=400,
            detail={"message": "Ballot validation failed", "errors": e.errors},
        )
    except InvalidInput as e:
        logger.error(f"Invalid election request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "result": result.to_dict()}


@app.post("/api/parse-csv")
async def parse_csv(request: CSVRequest):
    """Turn a Qualtrics export into candidate/ballot lists per position."""
    try:
        positions = parse_qualtrics_csv(request.content)
    except CSVFormatError as e:
        logger.error(f"CSV parsing failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "positions": [p.to_dict() for p in positions]}
