from __future__ import annotations

import json as _json

import pydantic
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from dive.api.deps import get_pipeline, get_session_gate
from dive.models.schemas import DiveRequest, DiveResponse
from dive.services.errors import PipelineError
from dive.services.logger import get_logger
from dive.services.pipeline import MISSING_INPUT_MESSAGE, DivePipeline
from dive.services.session_gate import SessionGate

router = APIRouter(prefix="/api/dive", tags=["dive"])

SESSION_COOKIE = "session-token"

log = get_logger("api.dive")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("", response_model=DiveResponse)
async def run_dive(
    request: Request,
    pipeline: DivePipeline = Depends(get_pipeline),
    gate: SessionGate = Depends(get_session_gate),
):
    """Fetch the candidate pages and synthesize one answer with sources."""
    decision = await gate.check(request.cookies.get(SESSION_COOKIE))
    if not decision.allowed:
        return JSONResponse(decision.to_body(), status_code=decision.status_code)

    try:
        payload = await request.json()
        body = DiveRequest.model_validate(payload)
    except (_json.JSONDecodeError, UnicodeDecodeError, pydantic.ValidationError) as e:
        log.debug(f"Rejected malformed dive request: {e}")
        return _error(MISSING_INPUT_MESSAGE, 400)

    try:
        result = await pipeline.run(
            body.query,
            [page.to_candidate() for page in body.pages],
        )
    except PipelineError as e:
        return _error(e.message, e.status_code)
    except Exception as e:
        log.exception(f"Unexpected dive failure: {e}")
        return _error(str(e) or "Internal Server Error", 500)

    return JSONResponse(
        DiveResponse.from_pipeline(result).model_dump(by_alias=True, exclude_none=True),
    )
