"""Port definitions (interfaces) for external dependencies.

Ports describe what the core needs from the outside world without tying it to
a particular storage backend or data source.
"""

from storefront.ports.repositories import Book, CatalogRepository, KeyValueStorage

__all__ = [
    "Book",
    "CatalogRepository",
    "KeyValueStorage",
]
