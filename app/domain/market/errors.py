"""
Domain-specific errors for the market bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class MarketDomainError(Exception):
    """Base error for all market domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class EngineComputationError(MarketDomainError):
    """Raised when an engine produces a value that cannot be scored."""

    def __init__(self, engine: str, field_name: str, value: float) -> None:
        super().__init__(
            f"{engine} computed a non-finite {field_name}: {value!r}"
        )
        self.engine = engine
        self.field_name = field_name
        self.value = value


class UnknownTaskError(MarketDomainError):
    """Raised when an on-demand refresh task name is not registered."""

    def __init__(self, task_name: str, available: list[str]) -> None:
        super().__init__(
            f"Unknown task: {task_name}. Available: {', '.join(available)}"
        )
        self.task_name = task_name
        self.available = available
