"""Diagnostics."""

from scsspy.diagnostics import codes
from scsspy.diagnostics.codes import DiagnosticSpec
from scsspy.diagnostics.diagnostic import Diagnostic, Severity
from scsspy.diagnostics.report import collect_diagnostics, has_errors

__all__ = [
    "Diagnostic",
    "DiagnosticSpec",
    "Severity",
    "codes",
    "collect_diagnostics",
    "has_errors",
]
