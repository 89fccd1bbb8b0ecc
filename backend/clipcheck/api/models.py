"""
Pydantic models for API request/response validation
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from ..agent.schemas import PotentialIssue, UNKNOWN_SOURCE


class AnalyzeRequest(BaseModel):
    """Request for a credibility analysis"""
    text: str = Field(..., min_length=1)
    source: Optional[str] = UNKNOWN_SOURCE


class AnalyzeResponse(BaseModel):
    """Final credibility verdict"""
    credibility_score: float
    potential_issues: List[PotentialIssue] = Field(default_factory=list)
    key_concerns: Optional[List[str]] = None
    recommendation: str


class CancelResponse(BaseModel):
    """Result of a cancellation request"""
    cancelled: bool


class MemoryStatus(BaseModel):
    free_gb: float
    total_gb: float
    is_critical: bool


# Health Check
class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    services: Dict[str, str]
    memory: MemoryStatus
    analysis_in_progress: bool = False
    version: str
