"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire for tracing agent
action executions, including:
- Automatic instrumentation of Pydantic AI model calls
- An execution event mirrored from the dispatcher's log entry

Monitoring is strictly best effort: nothing in this module may change the
outcome of an action execution.
"""

import logging
from typing import Optional

from ai_action.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

_initialized = False


def initialize_logfire(config: Optional[Settings] = None) -> bool:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    Initialization is conditional on ``LOGFIRE_ENABLED`` and ``LOGFIRE_TOKEN``.

    Args:
        config: Settings to read the Logfire options from (defaults to the process settings).

    Returns:
        True when Logfire was configured, False otherwise.
    """
    global _initialized

    logfire_config = (config or get_settings()).logfire
    if not logfire_config.enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not logfire_config.token:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    try:
        import logfire

        logfire.configure(
            token=logfire_config.token,
            service_name=logfire_config.service_name,
            environment=logfire_config.environment,
        )

        try:
            logfire.instrument_pydantic_ai()
            logger.info("Logfire: Pydantic AI instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument Pydantic AI: {e}")

        _initialized = True
        logger.info(
            f"Logfire monitoring initialized: "
            f"service={logfire_config.service_name}, "
            f"environment={logfire_config.environment}"
        )
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False


def is_logfire_initialized() -> bool:
    """Whether :func:`initialize_logfire` configured Logfire in this process."""
    return _initialized


def log_action_executed(
    agent: str,
    provider: str,
    model: str,
    input_tokens: int,
    output_tokens: int,
) -> None:
    """
    Mirror a successful action execution to Logfire.

    Args:
        agent: Type identity of the executed action
        provider: Provider key used for the call
        model: Model identifier used for the call
        input_tokens: Prompt tokens consumed
        output_tokens: Completion tokens generated
    """
    if not _initialized:
        return

    try:
        import logfire

        logfire.info(
            "ai-action.executed",
            agent=agent,
            provider=provider,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
    except Exception:
        logger.debug(f"Could not log action execution to Logfire: agent={agent}")
