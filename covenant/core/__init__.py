# Core module exports
from covenant.core.config import settings, get_settings
from covenant.core.logging import (
    configure_logging,
    configure_from_settings,
    bind_context,
    clear_context,
    unbind_context,
    validation_logger,
    message_logger,
)
