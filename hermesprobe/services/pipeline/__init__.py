"""Prepare pipeline service."""

from .service import PreparePipeline, PrepareReport

__all__ = ["PreparePipeline", "PrepareReport"]
