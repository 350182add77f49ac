"""Shared helpers for the car-following simulator."""
from utils.logging_utils import get_logger

__all__ = ["get_logger"]
