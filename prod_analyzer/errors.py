"""Exception types raised by the analyzer."""

from __future__ import annotations


class ProdAnalyzerError(Exception):
    """Base class for analyzer failures."""


class InvalidArgumentError(ProdAnalyzerError, ValueError):
    """Raised when a caller supplies an unknown severity, profile or format."""


class PolicyError(ProdAnalyzerError):
    """Raised when a policy document exists but cannot be used."""


class ScanError(ProdAnalyzerError):
    """Raised when the scan cannot run at all (e.g. unreadable target)."""
