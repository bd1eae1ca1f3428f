import logging

import pytest
from unittest.mock import MagicMock

from telegram.error import BadRequest, Forbidden, NetworkError

from apps.telegram_bot.handlers.error_handlers import error_handler


def make_context(error):
    context = MagicMock()
    context.error = error
    return context


class TestErrorHandler:
    @pytest.mark.asyncio
    async def test_outdated_query_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            await error_handler(None, make_context(BadRequest("Query is too old and response timeout expired")))
        assert caplog.records == []

    @pytest.mark.asyncio
    async def test_network_error_is_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            await error_handler(None, make_context(NetworkError("connection reset")))
        assert [r.levelname for r in caplog.records] == ["WARNING"]

    @pytest.mark.asyncio
    async def test_forbidden(self, caplog):
        with caplog.at_level(logging.WARNING):
            await error_handler(None, make_context(Forbidden("bot was blocked by the user")))
        assert "can no longer write" in caplog.text

    @pytest.mark.asyncio
    async def test_other_errors_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            await error_handler(None, make_context(RuntimeError("boom")))
        assert [r.levelname for r in caplog.records] == ["ERROR"]
