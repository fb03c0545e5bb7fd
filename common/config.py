"""Configuration management for Multi-Counter."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """Configuration settings for Multi-Counter."""
    
    # Number of counter panels shown side by side
    counter_count: int = 3
    
    # Counters are bounded to [0, max_value]
    max_value: int = 2
    
    # Turn overflow/underflow into no-ops instead of fatal errors
    clamp: bool = False
    
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


# Default configuration instance
default_config = Config()
