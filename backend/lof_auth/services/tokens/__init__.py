"""Token lifecycle: issuance, rotation, revocation and expiry cleanup."""

from .cleanup import TokenCleanupScheduler
from .dto import TokenConfig, TokenPairOut
from .durations import parse_duration
from .service import RefreshCheck, TokenService

__all__ = [
    "RefreshCheck",
    "TokenCleanupScheduler",
    "TokenConfig",
    "TokenPairOut",
    "TokenService",
    "parse_duration",
]
