# caselens/schemas/analysis.py
from datetime import datetime
from typing import List

from caselens.schemas.base import CamelModel


class AnalysisOut(CamelModel):
    summary: str
    insights: List[str]
    analyzed_at: datetime


class AnalyzeResponse(CamelModel):
    message: str
    analysis: AnalysisOut
