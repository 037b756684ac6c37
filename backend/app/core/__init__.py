from .errors import APIError, error_body
from .logging import JSONFormatter, request_id_var, setup_logging

__all__ = [
    "APIError",
    "error_body",
    "JSONFormatter",
    "request_id_var",
    "setup_logging",
]
