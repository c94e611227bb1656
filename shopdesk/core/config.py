"""
ShopDesk - Configuration Module
===============================

Centralized configuration management with environment variable validation.

DESIGN:
    Single source of truth for every id the ticket workflow needs, loaded
    from environment variables at startup. The Config dataclass is read-only
    for the rest of the process.

    Key patterns:
    - Singleton pattern via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
    - Permission helpers centralize the "support team" check

Author: حَـــــنَّـــــا
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Set

from shopdesk.core.logger import NY_TZ


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    DESIGN:
        Required fields raise ConfigValidationError if missing.
        All IDs are integers to prevent string comparison bugs.

    Attributes:
        discord_token: Discord bot authentication token.
        support_role_id: Role granted access to every ticket.
        purchase_category_id: Category purchase tickets are created under.
        support_category_id: Category support tickets are created under.
        transcript_channel_id: Archive channel for transcripts (optional).
        customer_role_id: Role granted by the done command (optional).
    """

    # -------------------------------------------------------------------------
    # Required
    # -------------------------------------------------------------------------

    discord_token: str
    support_role_id: int
    purchase_category_id: int
    support_category_id: int

    # -------------------------------------------------------------------------
    # Optional: Tickets
    # -------------------------------------------------------------------------

    transcript_channel_id: Optional[int] = None
    customer_role_id: Optional[int] = None
    ticket_delete_delay: int = 5  # Seconds between the deletion notice and delete

    # -------------------------------------------------------------------------
    # Optional: Commands
    # -------------------------------------------------------------------------

    command_prefix: str = ","
    owner_ids: Set[int] = field(default_factory=set)

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Standardized color palette for Discord embeds."""

    BLACK = 0x000000    # Ticket embeds (shop theme)
    GREEN = 0x1F5E2E    # Success / done
    GOLD = 0xE6B84A     # Warnings / prompts
    RED = 0xDC3545      # Closing / deletion

    SUCCESS = GREEN
    WARNING = GOLD
    ERROR = GOLD
    TICKET = BLACK


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_int(value: Optional[str], name: str) -> int:
    """
    Parse string to integer with descriptive error handling.

    Raises:
        ConfigValidationError: If value is missing or not a valid integer.
    """
    if not value:
        raise ConfigValidationError(f"Missing required: {name}")
    try:
        return int(value)
    except ValueError:
        raise ConfigValidationError(f"Invalid integer for {name}: {value}")


def _parse_int_optional(value: Optional[str]) -> Optional[int]:
    """Parse optional string to integer, returning None on failure."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_int_set(value: Optional[str]) -> Set[int]:
    """Parse comma-separated string (e.g. "123,456") to a set of integers."""
    if not value:
        return set()
    result = set()
    for part in value.split(","):
        part = part.strip()
        if part:
            try:
                result.add(int(part))
            except ValueError:
                pass  # Skip invalid entries silently
    return result


def _parse_int_with_default(
    value: Optional[str],
    default: int,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> int:
    """
    Parse optional integer with default and range validation.

    Returns:
        Parsed integer clamped to [min_val, max_val], or default.
    """
    if not value:
        return default
    from shopdesk.core.logger import logger
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default
    if min_val is not None and parsed < min_val:
        logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Validate URL format for webhooks, returning None if invalid."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from shopdesk.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    DESIGN:
        Validates all required variables upfront before creating the
        Config object, so a half-configured bot never starts.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    missing = []

    discord_token = os.getenv("DISCORD_TOKEN")
    if not discord_token:
        missing.append("DISCORD_TOKEN")

    required_ids = {}
    for name in ("SUPPORT_ROLE_ID", "PURCHASE_CATEGORY_ID", "SUPPORT_CATEGORY_ID"):
        raw = os.getenv(name)
        if not raw:
            missing.append(name)
        required_ids[name] = raw

    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    return Config(
        discord_token=discord_token,
        support_role_id=_parse_int(required_ids["SUPPORT_ROLE_ID"], "SUPPORT_ROLE_ID"),
        purchase_category_id=_parse_int(required_ids["PURCHASE_CATEGORY_ID"], "PURCHASE_CATEGORY_ID"),
        support_category_id=_parse_int(required_ids["SUPPORT_CATEGORY_ID"], "SUPPORT_CATEGORY_ID"),
        transcript_channel_id=_parse_int_optional(os.getenv("TRANSCRIPT_CHANNEL_ID")),
        customer_role_id=_parse_int_optional(os.getenv("CUSTOMER_ROLE_ID")),
        ticket_delete_delay=_parse_int_with_default(
            os.getenv("TICKET_DELETE_DELAY"), 5, "TICKET_DELETE_DELAY", min_val=0, max_val=60
        ),
        command_prefix=os.getenv("COMMAND_PREFIX") or ",",
        owner_ids=_parse_int_set(os.getenv("OWNER_IDS")),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> Config:
    """
    Validate configuration and log a summary at startup.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from shopdesk.core.logger import logger

    config = get_config()

    if not config.transcript_channel_id:
        logger.info("Optional config not set: TRANSCRIPT_CHANNEL_ID")
    if not config.customer_role_id:
        logger.info("Optional config not set: CUSTOMER_ROLE_ID")

    logger.tree("Configuration Validated", [
        ("Support Role", str(config.support_role_id)),
        ("Purchase Category", str(config.purchase_category_id)),
        ("Support Category", str(config.support_category_id)),
        ("Transcript Channel", str(config.transcript_channel_id or "None")),
        ("Delete Delay", f"{config.ticket_delete_delay}s"),
        ("Prefix", config.command_prefix),
    ], emoji="⚙️")

    return config


# =============================================================================
# Permission Helpers
# =============================================================================

def is_support_member(member, config: Optional[Config] = None) -> bool:
    """
    Check if a member may run ticket staff commands.

    Args:
        member: Discord member object to check.
        config: Config to check against (defaults to the global one).

    Returns:
        True if member is an owner or has the support role.
    """
    if member is None:
        return False

    config = config or get_config()
    if member.id in config.owner_ids:
        return True

    return any(role.id == config.support_role_id for role in getattr(member, "roles", []))


__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "get_config",
    "load_config",
    "validate_and_log_config",
    "is_support_member",
]
