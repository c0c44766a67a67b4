"""
Last.fm API Layer.

This package handles all communication with the Last.fm scrobbling API:
request signing, session management and rate limiting.
"""

from .auth import SessionManager
from .client import ScrobblerAPIClient
from .rate_limiter import AdaptiveRateLimiter
from .signer import sign

__all__ = ["AdaptiveRateLimiter", "ScrobblerAPIClient", "SessionManager", "sign"]
