"""
HTTP request models for the API.

These are Pydantic models for validating and parsing API requests.
"""

from .invoke_request import InvokeRequest
from .resume_request import ResumeRequest

__all__ = [
    "InvokeRequest",
    "ResumeRequest",
]
