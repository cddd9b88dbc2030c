from .error_handler import configure_error_handling
from .rate_limit import rate_limit
from .request_logger import configure_request_logging
from .security_headers import configure_security_headers

__all__ = [
    "configure_error_handling",
    "configure_request_logging",
    "configure_security_headers",
    "rate_limit",
]
