import logging
from typing import Optional, Any, Dict
import traceback

class CloudTreeError(Exception):
    """Base exception class for cloudtree errors"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}

class UsageError(CloudTreeError):
    """Raised when an operation is called with malformed arguments"""
    pass

class TreeIntegrityError(CloudTreeError):
    """Raised when a node list violates the tree invariants"""
    pass

class RemoteCommandError(CloudTreeError):
    """Raised when the remote authority rejects a command"""
    pass

class NodeNotFoundError(CloudTreeError):
    """Raised when a command references an unknown node id"""
    pass

class UnknownRouteError(CloudTreeError):
    """Raised when a command names a route the remote does not serve"""
    pass

def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Configure logging for the application"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )

def log_operation(logger: logging.Logger, operation: str, **kwargs):
    """Log an operation with its parameters"""
    # Never write the credential to the log
    params = {k: v for k, v in kwargs.items() if k != "apikey"}
    logger.info("Operation: %s", operation, extra={"parameters": params})

def handle_error(logger: logging.Logger, error: Exception, operation: str) -> Dict[str, Any]:
    """Handle and log an error, return error response"""
    error_details = {
        "type": type(error).__name__,
        "message": str(error),
        "operation": operation,
        "traceback": traceback.format_exc()
    }

    if isinstance(error, CloudTreeError):
        error_details.update(error.details)

    logger.error(
        "Error during %s: %s",
        operation,
        error,
        extra={"error_details": error_details},
        exc_info=True
    )

    return {
        "type": "error",
        "message": str(error),
        "details": error_details
    }
