"""
Shared console utilities for oneiromancer.

Provides a centralized Rich Console instance to avoid duplication.

oneiromancer/src/oneiromancer/console_utils.py
"""

from rich.console import Console

__all__ = ["console"]

# Global console instance used throughout oneiromancer
console = Console()
