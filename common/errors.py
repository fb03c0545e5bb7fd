"""Error types raised by Multi-Counter."""


class MultiCounterError(Exception):
    """Base class for every error the application reports."""


class CounterOverflow(MultiCounterError):
    """Raised when incrementing a counter already at its maximum."""
    
    def __init__(self, index: int, max_value: int):
        self.index = index
        self.max_value = max_value
        super().__init__(f"counter overflow: counter {index} is already at {max_value}")


class CounterUnderflow(MultiCounterError):
    """Raised when decrementing a counter already at zero."""
    
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"counter underflow: counter {index} is already at 0")


class TerminalInitError(MultiCounterError):
    """The terminal could not be switched into application mode."""


class TerminalRestoreError(MultiCounterError):
    """The terminal could not be returned to its original mode."""


class InputReadError(MultiCounterError):
    """Reading the next key event failed."""
