"""Pydantic response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error envelope returned for every non-2xx response."""

    error: str
    detail: str


class CompareResponse(BaseModel):
    job_id: str
    version1: int
    version2: int
    differences: str
