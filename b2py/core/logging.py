"""Logging utilities for b2py modules."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.
    
    Loggers propagate to the root logger so that ``basicConfig()`` works
    without explicit setup. A default level is only applied when the root
    logger has no handlers yet.
    
    Args:
        name: Logger name (``b2py.api``, ``b2py.upload``, ...)
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)
    
    return logger
