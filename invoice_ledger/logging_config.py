"""Logging configuration for the command line front end."""

from __future__ import annotations

import copy
import logging.config
from typing import Any, Dict

LOGGING: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s: %(message)s"},
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "simple",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "invoice_ledger": {"level": "DEBUG", "handlers": ["console"], "propagate": False},
        # openpyxl warns about unsupported workbook extensions
        "openpyxl": {"level": "ERROR", "propagate": True},
    },
}


def configure_logging(verbose: bool = False) -> None:
    config = copy.deepcopy(LOGGING)
    if verbose:
        config["handlers"]["console"]["level"] = "DEBUG"
        config["handlers"]["console"]["formatter"] = "verbose"
    logging.config.dictConfig(config)
