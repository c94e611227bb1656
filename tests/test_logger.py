"""
ShopDesk - Logger Tests
=======================

Tests for the error webhook alert.
"""

from unittest.mock import AsyncMock, patch

import pytest

from shopdesk.core.logger import logger


class TestErrorWebhook:
    """Tests for webhook alerts sent from logger.error()."""

    @pytest.mark.asyncio
    async def test_alert_task_is_tracked_until_done(self):
        """Test the alert task is referenced while it runs and released after."""
        send = AsyncMock()
        logger.set_webhook("https://discord.com/api/webhooks/1/x")
        try:
            with patch.object(logger, "_send_webhook_error", send):
                logger.error("Ticket Delete Failed", [("Channel", "5000")])

                assert len(logger._webhook_tasks) == 1
                task = next(iter(logger._webhook_tasks))
                await task
        finally:
            logger.set_webhook(None)

        send.assert_awaited_once_with("Ticket Delete Failed", [("Channel", "5000")])
        assert logger._webhook_tasks == set()

    def test_no_loop_skips_alert(self):
        """Test errors logged outside an event loop only go to the file."""
        logger.set_webhook("https://discord.com/api/webhooks/1/x")
        try:
            logger.error("Startup Failed", [("Reason", "test")])
        finally:
            logger.set_webhook(None)

        assert logger._webhook_tasks == set()
