"""
Configuration settings for the quote engine

Loads environment variables (and an optional .env file) and provides the
defaults callers get when they omit slippage arguments.
"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv

from .data.types import Percentage, SlippageStrategy
from .errors import InvalidInputError

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Quote engine settings"""

    # Slippage defaults
    DEFAULT_SLIPPAGE_BPS: int = int(os.getenv("WHIRLPOOL_QUOTE_SLIPPAGE_BPS", 100))
    DEFAULT_SLIPPAGE_STRATEGY: str = os.getenv("WHIRLPOOL_QUOTE_SLIPPAGE_STRATEGY", "price_bound")

    # Logging
    LOG_LEVEL: str = os.getenv("WHIRLPOOL_QUOTE_LOG_LEVEL", "WARNING")
    DEBUG: bool = os.getenv("WHIRLPOOL_QUOTE_DEBUG", "False").lower() == "true"

    def default_slippage(self) -> Percentage:
        """Default slippage tolerance as a Percentage"""
        return Percentage.from_bps(self.DEFAULT_SLIPPAGE_BPS)

    def slippage_strategy(self, name: Optional[str] = None) -> SlippageStrategy:
        """Resolve a strategy name (or the configured default)"""
        value = (name or self.DEFAULT_SLIPPAGE_STRATEGY).lower()
        try:
            return SlippageStrategy(value)
        except ValueError:
            choices = ", ".join(s.value for s in SlippageStrategy)
            raise InvalidInputError(f"unknown slippage strategy: {value} (choices: {choices})") from None

    def log_level(self) -> int:
        if self.DEBUG:
            return logging.DEBUG
        return getattr(logging, self.LOG_LEVEL.upper(), logging.WARNING)


# Create global settings instance
settings = Settings()


def configure_logging(level: Optional[int] = None) -> logging.Logger:
    """Attach a basic stream handler to the package logger"""
    logger = logging.getLogger("whirlpool_quote")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level if level is not None else settings.log_level())
    return logger
