"""HTTP API."""

from skyscrape.api.app import create_app
from skyscrape.api.gate import AdmissionGate, AllowAll, FixedWindowRateLimiter, default_gates

__all__ = ['AdmissionGate', 'AllowAll', 'FixedWindowRateLimiter', 'create_app', 'default_gates']
