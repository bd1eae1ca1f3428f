# exceptions/service_exceptions.py - Service-related exceptions
from typing import Optional, Dict, Any
from .base_exceptions import PlaylistNotifierException


class ConfigurationException(PlaylistNotifierException):
    """Exception raised when configuration is invalid"""

    def __init__(self, config_key: str, error: str, details: Optional[Dict[str, Any]] = None):
        message = f"Configuration error for '{config_key}': {error}"
        super().__init__(message, details)
        self.config_key = config_key
        self.error = error

