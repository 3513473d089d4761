"""Centralized logging utilities for the modeleval package.

The package logger ``modeleval`` owns the handlers. Library modules log
through children obtained with ``get_module_logger``; diagnostics written by
models are routed to ``modeleval.model`` by ``callbacks.LoggingLogger``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from modeleval.defaults import DEFAULT_LOG_LEVEL, DEFAULT_LOGGER_NAME


class ModelEvalLogger:
    """Factory class for configured modeleval loggers."""

    _formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    @classmethod
    def get_logger(
        cls,
        name: str = DEFAULT_LOGGER_NAME,
        level: int = DEFAULT_LOG_LEVEL,
        log_file: Optional[Union[str, Path]] = None,
        propagate: bool = False,
    ) -> logging.Logger:
        """
        Return a logger with modeleval formatting.

        A stream handler is attached the first time a name is requested.
        Repeated calls reuse it, so handlers never pile up.

        Args:
            name: Logger name.
            level: Level set on the logger on every call.
            log_file: Also write records to this file.
            propagate: Whether records also reach ancestor loggers.
        """
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = propagate

        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(cls._formatter)
            logger.addHandler(handler)

        if log_file is not None:
            cls.add_file_handler(logger, log_file)
        return logger

    @classmethod
    def add_file_handler(cls, logger: logging.Logger, log_file: Union[str, Path]) -> logging.FileHandler:
        """Attach a file handler for ``log_file`` unless one is already attached."""
        log_path = Path(log_file).resolve()
        for handler in logger.handlers:
            if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_path:
                return handler

        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path)
        handler.setFormatter(cls._formatter)
        logger.addHandler(handler)
        return handler

    @classmethod
    def get_module_logger(cls, module_name: str) -> logging.Logger:
        """Child of the package logger that leaves output to its parent."""
        parent = logging.getLogger(DEFAULT_LOGGER_NAME)
        if not parent.handlers:
            cls.get_logger()
        logger = logging.getLogger(module_name)
        logger.propagate = True
        return logger
