import time

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.deps import get_qa_service
from api.schemas import (
    AskRequest,
    AskResponse,
    ErrorResponse,
    PROCESSING_FAILED,
    QUESTION_REQUIRED,
)
from core.exceptions import CustomException, ValidationError
from core.logger import get_logger
from orchestration.service import QAService

logger = get_logger("api.main")

app = FastAPI(title="Work Plan Q&A API", version="0.1")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )

# ---------- Errors ----------

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # unparseable body or non-string question
    logger.info("event=ASK_REJECTED | reason=invalid_body")
    return error_response(400, QUESTION_REQUIRED)

@app.exception_handler(CustomException)
async def custom_exception_handler(request: Request, exc: CustomException):
    logger.error("event=UNHANDLED_APP_ERROR | error=%s", exc)
    return error_response(500, PROCESSING_FAILED)

# ---------- Ask ----------

@app.post(
    "/ask",
    response_model=AskResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def ask(payload: AskRequest, service: QAService = Depends(get_qa_service)):

    start = time.perf_counter()

    try:
        answer = service.ask(payload.question)
        return AskResponse(answer=answer)

    except ValidationError:
        logger.info("event=ASK_REJECTED | reason=empty_question")
        return error_response(400, QUESTION_REQUIRED)

    except Exception:
        logger.exception("event=ASK_FAILED | index_state=%s", service.index_status().value)
        return error_response(500, PROCESSING_FAILED)

    finally:
        latency = time.perf_counter() - start
        logger.info(
            "event=ASK_COMPLETE | latency_ms=%d",
            int(latency * 1000),
        )
