"""Service layer modules for the EmailSpy API."""

from . import email_check_service, engine_service

__all__ = [
    "email_check_service",
    "engine_service",
]
