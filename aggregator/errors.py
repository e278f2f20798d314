"""Aggregator error classes."""


class AggregatorError(Exception):
    """Base error for pool aggregation."""

    pass


class ConfigError(AggregatorError):
    """Configuration value could not be parsed."""

    pass


class InvalidAmountError(AggregatorError, ValueError):
    """Amount is not a valid decimal numeral."""

    pass


class UnrecognizedPoolShapeError(AggregatorError):
    """Raw pool record does not match any known pool representation."""

    def __init__(self, pool_id: str, pool_type: str) -> None:
        super().__init__(f"Filtered pool {pool_id} ({pool_type}) not serialized as a valid pool")
        self.pool_id = pool_id
        self.pool_type = pool_type


class UpstreamError(AggregatorError):
    """An upstream service request failed or returned an unusable payload."""

    def __init__(self, service: str, message: str) -> None:
        super().__init__(f"{service}: {message}")
        self.service = service
