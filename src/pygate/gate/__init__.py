from .render import Gate, Rendered, Outcome, Loading, LOADING
from .route import (
    RouteAdmission,
    AdmissionRequest,
    Admission,
    Continue,
    RedirectTo,
    PROTECTED_PATHS,
)

__all__ = [
    "Gate",
    "Rendered",
    "Outcome",
    "Loading",
    "LOADING",
    "RouteAdmission",
    "AdmissionRequest",
    "Admission",
    "Continue",
    "RedirectTo",
    "PROTECTED_PATHS",
]
