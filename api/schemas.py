from typing import Optional
from pydantic import BaseModel

QUESTION_REQUIRED = "Question is required"
PROCESSING_FAILED = "Failed to process question"

class AskRequest(BaseModel):
    # validated by the handler so a missing question maps to 400, not 422
    question: Optional[str] = None

class AskResponse(BaseModel):
    answer: str

class ErrorResponse(BaseModel):
    error: str
