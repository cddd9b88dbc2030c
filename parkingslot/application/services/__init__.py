from .password_hashing import WerkzeugPasswordHasher
from .token_service import JwtTokenService

__all__ = ["JwtTokenService", "WerkzeugPasswordHasher"]
