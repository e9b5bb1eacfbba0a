"""Mock implementations and builders for testing."""

from tests.mocks.books import make_book
from tests.mocks.storage import FailingKeyValueStorage, YieldingKeyValueStorage

__all__ = ["FailingKeyValueStorage", "YieldingKeyValueStorage", "make_book"]
