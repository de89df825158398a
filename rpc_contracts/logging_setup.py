"""
Logging setup.

Every record gets a call_id attribute: the id of the call currently being
dispatched by Service.call, or '-' outside a call.
"""
import logging
import uuid
from contextvars import ContextVar, Token
from typing import Optional

from .settings import ContractSettings, settings as default_settings

call_id_ctx: ContextVar[str] = ContextVar('call_id', default='-')


class CallIdFilter(logging.Filter):
    def filter(self, record):
        record.call_id = call_id_ctx.get()
        return True


def new_call_id() -> Token:
    """Set a fresh call id for the current context; pass the token to reset_call_id."""
    return call_id_ctx.set(str(uuid.uuid4()))


def reset_call_id(token: Token) -> None:
    call_id_ctx.reset(token)


def configure_logging(config: Optional[ContractSettings] = None) -> None:
    """Configure root logging once and make sure every handler sees call_id."""
    config = config or default_settings

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=getattr(logging, config.log_level, logging.INFO),
            format=config.log_format,
        )

    for handler in logging.root.handlers:
        if not any(isinstance(f, CallIdFilter) for f in handler.filters):
            handler.addFilter(CallIdFilter())
