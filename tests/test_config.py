"""
ShopDesk - Configuration Tests
==============================

Tests for environment loading and the support-team check.
"""

from types import SimpleNamespace

import pytest

from shopdesk.core.config import (
    Config,
    ConfigValidationError,
    _parse_int_set,
    _parse_int_with_default,
    _validate_url,
    is_support_member,
    load_config,
)


REQUIRED_ENV = {
    "DISCORD_TOKEN": "token",
    "SUPPORT_ROLE_ID": "200",
    "PURCHASE_CATEGORY_ID": "300",
    "SUPPORT_CATEGORY_ID": "301",
}

OPTIONAL_ENV = (
    "TRANSCRIPT_CHANNEL_ID",
    "CUSTOMER_ROLE_ID",
    "TICKET_DELETE_DELAY",
    "COMMAND_PREFIX",
    "OWNER_IDS",
    "ERROR_WEBHOOK_URL",
)


@pytest.fixture
def env(monkeypatch):
    """Minimal valid environment with every optional variable unset."""
    for name, value in REQUIRED_ENV.items():
        monkeypatch.setenv(name, value)
    for name in OPTIONAL_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLoadConfig:
    """Tests for load_config()."""

    def test_required_only(self, env):
        """Test defaults apply when only required variables are set."""
        config = load_config()
        assert config.discord_token == "token"
        assert config.support_role_id == 200
        assert config.purchase_category_id == 300
        assert config.support_category_id == 301
        assert config.transcript_channel_id is None
        assert config.customer_role_id is None
        assert config.ticket_delete_delay == 5
        assert config.command_prefix == ","
        assert config.owner_ids == set()

    def test_missing_required_lists_all(self, env):
        """Test every missing variable is named in one error."""
        env.delenv("DISCORD_TOKEN")
        env.delenv("SUPPORT_CATEGORY_ID")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config()

        message = str(exc_info.value)
        assert "DISCORD_TOKEN" in message
        assert "SUPPORT_CATEGORY_ID" in message
        assert "PURCHASE_CATEGORY_ID" not in message

    def test_invalid_required_id(self, env):
        """Test a non-numeric id is rejected."""
        env.setenv("SUPPORT_ROLE_ID", "not-a-number")
        with pytest.raises(ConfigValidationError, match="SUPPORT_ROLE_ID"):
            load_config()

    def test_optional_values(self, env):
        """Test optional variables are parsed."""
        env.setenv("TRANSCRIPT_CHANNEL_ID", "400")
        env.setenv("CUSTOMER_ROLE_ID", "500")
        env.setenv("TICKET_DELETE_DELAY", "10")
        env.setenv("COMMAND_PREFIX", "!")
        env.setenv("OWNER_IDS", "1, 2,3")

        config = load_config()
        assert config.transcript_channel_id == 400
        assert config.customer_role_id == 500
        assert config.ticket_delete_delay == 10
        assert config.command_prefix == "!"
        assert config.owner_ids == {1, 2, 3}


class TestParseHelpers:
    """Tests for the parsing helpers."""

    def test_parse_int_set_skips_invalid(self):
        """Test invalid entries are dropped."""
        assert _parse_int_set("1,abc,,2") == {1, 2}

    def test_parse_int_with_default_clamps(self):
        """Test range limits are applied."""
        assert _parse_int_with_default("-5", 5, "X", min_val=0, max_val=60) == 0
        assert _parse_int_with_default("600", 5, "X", min_val=0, max_val=60) == 60
        assert _parse_int_with_default("junk", 5, "X") == 5
        assert _parse_int_with_default(None, 5, "X") == 5

    def test_validate_url(self):
        """Test only http(s) webhook URLs are accepted."""
        assert _validate_url("https://discord.com/api/webhooks/1/x", "W") == "https://discord.com/api/webhooks/1/x"
        assert _validate_url("ftp://nope", "W") is None
        assert _validate_url(None, "W") is None


class TestIsSupportMember:
    """Tests for is_support_member()."""

    def test_support_role(self, config):
        """Test members holding the support role pass."""
        member = SimpleNamespace(id=1, roles=[SimpleNamespace(id=config.support_role_id)])
        assert is_support_member(member, config) is True

    def test_owner_without_role(self, config):
        """Test OWNER_IDS pass without the role."""
        member = SimpleNamespace(id=999, roles=[])
        assert is_support_member(member, config) is True

    def test_regular_member(self, config):
        """Test other members are rejected."""
        member = SimpleNamespace(id=2, roles=[SimpleNamespace(id=1)])
        assert is_support_member(member, config) is False

    def test_no_member(self, config):
        """Test None is rejected."""
        assert is_support_member(None, config) is False

    def test_user_without_roles(self):
        """Test a plain user (no roles attribute) is rejected."""
        config = Config("t", 200, 300, 301)
        assert is_support_member(SimpleNamespace(id=5), config) is False
