"""
Custom exceptions for the ISDA standard model.
"""


class CDSError(Exception):
    """Base exception for all ISDA model errors."""


class CurveError(CDSError):
    """Invalid curve construction or query."""


class BootstrapError(CurveError):
    """Error during credit curve calibration."""


class ConvergenceError(CDSError):
    """Root bracketing or root finding failed."""


class ExpiredCDSError(CDSError):
    """Operation is undefined for a CDS whose protection has ended."""
