"""Partial checksums: sample, fingerprint, record and validate file trees."""

__version__ = "0.1.0"
