"""
Retry configuration for status queries.

Retries use a fixed pause between attempts and a hard attempt ceiling.
A probe never retries indefinitely.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for status query retry behavior.

    Attributes:
        max_attempts: Total attempts including the first one (default 3)
        delay_seconds: Fixed pause between attempts (default 0.5)

    Example:
        config = RetryConfig(max_attempts=3, delay_seconds=0.5)
        for attempt in range(config.max_attempts):
            ...
            if config.should_retry(attempt + 1):
                await asyncio.sleep(config.delay_seconds)
    """

    max_attempts: int = 3
    delay_seconds: float = 0.5

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {self.delay_seconds}")

    def should_retry(self, attempts_made: int) -> bool:
        """
        Check if another attempt should be made.

        Args:
            attempts_made: Number of attempts already made

        Returns:
            True if attempts_made < max_attempts, False otherwise
        """
        return attempts_made < self.max_attempts
