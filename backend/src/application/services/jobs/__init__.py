"""
Jobs Service Package
"""
from .service import JobService

__all__ = ["JobService"]
