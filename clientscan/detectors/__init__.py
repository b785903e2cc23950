"""Heuristic detectors for client-side authorization signals."""

from clientscan.detectors.controls import detect_hidden_controls
from clientscan.detectors.devtools import detect_devtools_blocking
from clientscan.detectors.hints import detect_role_hints
from clientscan.detectors.password import detect_password_values
from clientscan.detectors.secrets import detect_inline_secrets

__all__ = [
    "detect_devtools_blocking",
    "detect_hidden_controls",
    "detect_inline_secrets",
    "detect_password_values",
    "detect_role_hints",
]
