# tests/test_exceptions.py
from exceptions import (
    PlaylistNotifierException, ConfigurationException,
    YouTubeException, FetchError, MissingFieldError, EnrichmentError, EmptyResponseError,
    LengthMismatchError, ShortProbeError, ChannelResolveError,
    DatabaseException, DatabaseConnectionError, CursorUpdateError, DuplicateSubscriptionError,
    NotifierError, SendError, DeleteError
)


class TestBaseException:
    def test_message_and_details(self):
        error = PlaylistNotifierException("Something broke", {"feed": "UUa"})
        assert str(error) == "Something broke"
        assert error.details == {"feed": "UUa"}

    def test_details_default_to_empty(self):
        assert PlaylistNotifierException("x").details == {}


class TestYouTubeExceptions:
    """Test content API exception classes"""

    def test_fetch_error_with_status_and_reason(self):
        error = FetchError("/videos", status_code=403, reason="quotaExceeded")
        assert str(error) == "Failed to fetch /videos (HTTP 403): quotaExceeded"
        assert error.status_code == 403
        assert isinstance(error, YouTubeException)

    def test_fetch_error_without_status(self):
        error = FetchError("/playlistItems")
        assert str(error) == "Failed to fetch /playlistItems"
        assert error.status_code is None

    def test_missing_field_error(self):
        error = MissingFieldError("UUa", "publishedAt")
        assert "UUa" in str(error)
        assert error.field == "publishedAt"

    def test_enrichment_errors_share_base(self):
        for error in (EmptyResponseError(3), LengthMismatchError(3, 2), ShortProbeError("vid", 404)):
            assert isinstance(error, EnrichmentError)
            assert isinstance(error, YouTubeException)

    def test_length_mismatch_message(self):
        error = LengthMismatchError(3, 2)
        assert str(error) == "Extras request for 3 items returned 2"

    def test_short_probe_error(self):
        assert str(ShortProbeError("vid", 429)) == "Shorts probe for vid failed (HTTP 429)"
        assert str(ShortProbeError("vid")) == "Shorts probe for vid failed"

    def test_channel_resolve_error(self):
        error = ChannelResolveError("https://www.youtube.com/@x", "HTTP Error: timeout")
        assert error.reason == "HTTP Error: timeout"
        assert "@x" in str(error)


class TestDatabaseExceptions:
    def test_connection_error(self):
        error = DatabaseConnectionError("refused")
        assert str(error) == "Database connection failed: refused"
        assert isinstance(error, DatabaseException)

    def test_cursor_update_error(self):
        error = CursorUpdateError("UUa", 5, "timeout")
        assert error.feed_id == "UUa"
        assert error.subscriber_id == 5
        assert isinstance(error, DatabaseException)

    def test_duplicate_subscription(self):
        error = DuplicateSubscriptionError("UUa", 5)
        assert str(error) == "Chat 5 is already subscribed to UUa"


class TestNotifierExceptions:
    def test_send_error(self):
        error = SendError(5, "Forbidden")
        assert isinstance(error, NotifierError)
        assert error.subscriber_id == 5

    def test_delete_error(self):
        error = DeleteError(5, 9, "too old")
        assert isinstance(error, NotifierError)
        assert error.message_id == 9


class TestServiceExceptions:
    def test_configuration_exception(self):
        error = ConfigurationException("BOT_TOKEN", "missing")
        assert str(error) == "Configuration error for 'BOT_TOKEN': missing"
        assert error.config_key == "BOT_TOKEN"
