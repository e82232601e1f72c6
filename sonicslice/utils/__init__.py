"""
SonicSlice Utilities Module

Utility functions and helpers:
- logger: Logging configuration
"""
from .logger import get_logger, logger, setup_logger

__all__ = ['get_logger', 'logger', 'setup_logger']
