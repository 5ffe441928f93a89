# caselens/schemas/chat.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ChatRequest(BaseModel):
    # blank/missing questions are rejected by the service with a 400, not a 422
    question: Optional[str] = None


class ChatResponse(BaseModel):
    answer: str
    question: str
    timestamp: datetime
