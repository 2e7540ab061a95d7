"""
Test utilities for the Firehose log processor.

This package contains payload builders and response analysis helpers
shared by the unit tests.
"""

from .response_analyzer import ResponseAnalyzer, ResponseSizeAnalysis

__all__ = ['ResponseAnalyzer', 'ResponseSizeAnalysis']
