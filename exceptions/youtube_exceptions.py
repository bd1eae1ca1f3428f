# exceptions/youtube_exceptions.py - Content API exceptions
from typing import Optional, Dict, Any
from .base_exceptions import PlaylistNotifierException


class YouTubeException(PlaylistNotifierException):
    """Base exception for content API operations"""
    pass


class FetchError(YouTubeException):
    """Exception raised when a content API request fails (network, HTTP status, quota)"""

    def __init__(self, endpoint: str, status_code: Optional[int] = None, reason: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        message = f"Failed to fetch {endpoint}"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        if reason:
            message += f": {reason}"
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code
        self.reason = reason


class MissingFieldError(YouTubeException):
    """Exception raised when a feed item lacks its id or publish time"""

    def __init__(self, feed_id: str, field: str, details: Optional[Dict[str, Any]] = None):
        message = f"Item in feed {feed_id} is missing required field '{field}'"
        super().__init__(message, details)
        self.feed_id = feed_id
        self.field = field


class EnrichmentError(YouTubeException):
    """Base exception for a failed extras batch"""
    pass


class EmptyResponseError(EnrichmentError):
    """Exception raised when extras were requested for items but none came back"""

    def __init__(self, requested: int, details: Optional[Dict[str, Any]] = None):
        message = f"Extras request for {requested} items returned nothing"
        super().__init__(message, details)
        self.requested = requested


class LengthMismatchError(EnrichmentError):
    """Exception raised when the extras response does not line up with the request"""

    def __init__(self, requested: int, received: int, details: Optional[Dict[str, Any]] = None):
        message = f"Extras request for {requested} items returned {received}"
        super().__init__(message, details)
        self.requested = requested
        self.received = received


class ShortProbeError(EnrichmentError):
    """Exception raised when the shorts probe answers with an unexpected status"""

    def __init__(self, item_id: str, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        message = f"Shorts probe for {item_id} failed"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        super().__init__(message, details)
        self.item_id = item_id
        self.status_code = status_code


class ChannelResolveError(YouTubeException):
    """Exception raised when a channel URL cannot be resolved to an uploads playlist"""

    def __init__(self, url: str, reason: str, details: Optional[Dict[str, Any]] = None):
        message = f"Could not resolve channel at \"{url}\": {reason}"
        super().__init__(message, details)
        self.url = url
        self.reason = reason
