from .logger import (
    clear_request_context,
    get_logger,
    get_request_context,
    log_stage,
    set_request_context,
    setup_logging,
)

__all__ = [
    "clear_request_context",
    "get_logger",
    "get_request_context",
    "log_stage",
    "set_request_context",
    "setup_logging",
]
