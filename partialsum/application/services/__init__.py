"""Application services for orchestrating domain logic."""

from .fingerprinter import FileFingerprinter
from .validation_engine import ValidationEngine

__all__ = ["FileFingerprinter", "ValidationEngine"]
