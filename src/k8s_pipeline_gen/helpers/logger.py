"""Logging configuration for the pipeline generator."""

import logging
import os
import sys

PACKAGE_LOGGER = "k8s_pipeline_gen"
LOG_LEVEL_ENV_VAR = "K8S_PIPELINE_GEN_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str = PACKAGE_LOGGER, level: str = "WARNING", json_output: bool = False
) -> logging.Logger:
    """
    Attach a single stream handler to a logger.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Log to stderr instead of stdout; used whenever stdout
            carries JSON or a rendered artifact

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(getattr(logging, level.upper()))

    handler = logging.StreamHandler(sys.stderr if json_output else sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get the ``k8s_pipeline_gen.<name>`` logger.

    Once the CLI has configured the package logger, component loggers simply
    propagate to it. Library callers that never configured logging get a
    stderr handler at ``K8S_PIPELINE_GEN_LOG_LEVEL`` (default WARNING), so
    stdout stays free for their own output.
    """
    logger = logging.getLogger(f"{PACKAGE_LOGGER}.{name}")

    if logging.getLogger(PACKAGE_LOGGER).handlers:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
        return logger

    level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING")
    return setup_logger(logger.name, level, json_output=True)
