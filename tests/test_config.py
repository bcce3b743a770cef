"""
Test configuration and logging setup.
"""
import logging

from texprep.config import Config


def test_setup_logging_sets_level():
    """The package logger takes the requested level."""
    logger = Config.setup_logging("DEBUG")
    assert logger.name == "texprep"
    assert logger.level == logging.DEBUG


def test_setup_logging_is_idempotent():
    """Repeated setup replaces the handler instead of stacking them."""
    Config.setup_logging()
    logger = Config.setup_logging()
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


def test_module_loggers_are_children():
    """Module loggers inherit the package logger's handlers."""
    Config.setup_logging("WARNING")
    child = logging.getLogger("texprep.utils.io")
    assert child.getEffectiveLevel() == logging.WARNING
