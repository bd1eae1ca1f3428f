# exceptions/__init__.py - Exception imports
from .base_exceptions import PlaylistNotifierException
from .service_exceptions import ConfigurationException
from .youtube_exceptions import (
    YouTubeException, FetchError, MissingFieldError, EnrichmentError,
    EmptyResponseError, LengthMismatchError, ShortProbeError, ChannelResolveError
)
from .database_exceptions import (
    DatabaseException, DatabaseConnectionError, CursorUpdateError, DuplicateSubscriptionError
)
from .notifier_exceptions import NotifierError, SendError, DeleteError
