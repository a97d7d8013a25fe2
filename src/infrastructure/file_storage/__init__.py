"""
File Storage Infrastructure Module

Exports:
    - MediaStorageService: Local storage for uploaded generation inputs
"""

from .media_storage_service import MediaStorageService

__all__ = ["MediaStorageService"]
