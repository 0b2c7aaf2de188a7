"""
Core data types shared by the provider adapters and the host.
"""

from .types import KeyTestResult, PostContext, SummaryRequest, SummaryResult

__all__ = ["KeyTestResult", "PostContext", "SummaryRequest", "SummaryResult"]
