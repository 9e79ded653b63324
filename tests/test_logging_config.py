import logging.config

from invoice_ledger.logging_config import LOGGING, configure_logging


def test_package_logger_does_not_propagate_to_root():
    package = LOGGING["loggers"]["invoice_ledger"]
    assert package["handlers"] == ["console"]
    assert package["propagate"] is False


def test_verbose_logging_lowers_console_level(monkeypatch):
    applied = []
    monkeypatch.setattr(logging.config, "dictConfig", applied.append)

    configure_logging(verbose=True)
    configure_logging()

    verbose, quiet = applied
    assert verbose["handlers"]["console"]["level"] == "DEBUG"
    assert verbose["handlers"]["console"]["formatter"] == "verbose"
    assert quiet["handlers"]["console"]["level"] == "WARNING"
    assert LOGGING["handlers"]["console"]["level"] == "WARNING"
