"""
app/schemas/response.py

Shared response bodies: error envelope and health report.
"""

from pydantic import BaseModel, Field
from typing import Optional, Any, Dict


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    """Body of GET /health."""

    status: str = Field(..., description="OK, degraded or unhealthy")
    timestamp: str
    uptime: int = Field(..., description="Seconds since startup")
    environment: str
    backend: str
    totalUsers: Optional[int] = None
    checks: Dict[str, str] = Field(default_factory=dict)
