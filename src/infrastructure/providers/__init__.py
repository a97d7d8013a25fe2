"""
AI Provider Infrastructure Module

Exports:
    - HttpGenerationProvider: httpx client for the provider API
"""

from .http_generation_provider import HttpGenerationProvider

__all__ = ["HttpGenerationProvider"]
