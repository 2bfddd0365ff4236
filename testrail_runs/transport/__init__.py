"""Transport module - TestRail API communication."""

from .http_client import TestRailHttpClient, Transport
from .mock_transport import MockTransport, default_dataset, load_mock_data
from .retry_policy import RetryPolicy, default_retry_policy, no_retry_policy

__all__ = [
    "TestRailHttpClient",
    "Transport",
    "MockTransport",
    "default_dataset",
    "load_mock_data",
    "RetryPolicy",
    "default_retry_policy",
    "no_retry_policy",
]
