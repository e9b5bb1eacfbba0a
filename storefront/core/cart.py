"""Cart model and the storage-backed cart store.

There is no shared in-memory cart. The single source of truth is a JSON blob
held in durable key-value storage under one named key. Every surface that
needs the cart (catalog view, navbar badge, HTTP handler) builds its own
``CartStore`` over the same storage and re-reads whenever it needs current
state.

Each mutation is a full read-modify-write of the blob with no locking or
compare-and-swap. Two surfaces racing on the same key can lose an update;
the last write observed by storage wins.
"""

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from storefront.core.logging import get_logger
from storefront.ports.repositories import Book, CatalogRepository, KeyValueStorage

logger = get_logger(__name__)

DEFAULT_CART_KEY = "cart"


@dataclass(frozen=True)
class CartLine:
    """One book's quantity entry. ``book_id`` is a reference, not ownership."""

    book_id: str
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {self.quantity}")


@dataclass(frozen=True)
class Cart:
    """Immutable snapshot of the cart, keyed by book id in insertion order."""

    lines: dict[str, CartLine] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, quantities: Mapping[str, int]) -> "Cart":
        return cls(
            lines={
                book_id: CartLine(book_id, quantity)
                for book_id, quantity in quantities.items()
            }
        )

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines.values())

    def __len__(self) -> int:
        return len(self.lines)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self.lines

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def quantity_of(self, book_id: str) -> int:
        line = self.lines.get(book_id)
        return line.quantity if line else 0

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self.lines.values())

    def to_mapping(self) -> dict[str, int]:
        return {book_id: line.quantity for book_id, line in self.lines.items()}

    def with_quantity(self, book_id: str, quantity: int) -> "Cart":
        """Return a copy with the line set to ``quantity`` (<= 0 removes it)."""
        quantities = self.to_mapping()
        if quantity <= 0:
            quantities.pop(book_id, None)
        else:
            quantities[book_id] = quantity
        return Cart.from_mapping(quantities)


# =============================================================================
# Serialization
# =============================================================================


def encode_cart(cart: Cart) -> str:
    """Serialize a cart as a JSON object mapping book id to quantity."""
    return json.dumps(cart.to_mapping(), separators=(",", ":"))


def decode_cart(raw: str | None) -> Cart:
    """Deserialize a stored cart blob.

    Absent data yields an empty cart. So does anything malformed: invalid
    or too deeply nested JSON, a non-object payload, or any quantity that is
    not a positive integer. Nothing is raised.
    """
    if raw is None:
        return Cart()

    try:
        payload = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as ex:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        logger.warning("cart_data_corrupt", reason="invalid_json", error=str(ex))
        return Cart()

    if not isinstance(payload, dict):
        logger.warning(
            "cart_data_corrupt",
            reason="not_an_object",
            payload_type=type(payload).__name__,
        )
        return Cart()

    quantities: dict[str, int] = {}
    for book_id, quantity in payload.items():
        # bool is an int subclass; true/false are not quantities
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            logger.warning(
                "cart_data_corrupt",
                reason="invalid_quantity",
                book_id=book_id,
                quantity=quantity,
            )
            return Cart()
        quantities[book_id] = quantity

    return Cart.from_mapping(quantities)


# =============================================================================
# Store
# =============================================================================


class CartStore:
    """Read and mutate the persisted cart.

    Holds no cart state of its own, only a handle to storage and the key.
    Any number of instances may point at the same storage.
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_CART_KEY) -> None:
        """Initialize the store.

        Args:
            storage: Durable key-value medium shared by all surfaces.
            key: Name of the key holding the serialized cart.
        """
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def read(self) -> Cart:
        """Reconstruct the current cart from storage."""
        return decode_cart(await self._storage.get(self._key))

    async def _write(self, cart: Cart) -> None:
        await self._storage.set(self._key, encode_cart(cart))

    async def add_or_increment(self, book_id: str, qty: int = 1) -> Cart:
        """Add ``qty`` of a book, creating the line if needed.

        Raises:
            ValueError: If ``qty`` is less than 1.
        """
        if qty < 1:
            raise ValueError(f"qty must be >= 1, got {qty}")

        cart = await self.read()
        updated = cart.with_quantity(book_id, cart.quantity_of(book_id) + qty)
        await self._write(updated)

        logger.info(
            "cart_line_added",
            book_id=book_id,
            added=qty,
            quantity=updated.quantity_of(book_id),
        )
        return updated

    async def set_quantity(self, book_id: str, qty: int) -> Cart:
        """Set a line's quantity exactly. ``qty <= 0`` removes the line."""
        cart = await self.read()
        updated = cart.with_quantity(book_id, qty)
        await self._write(updated)

        if qty <= 0:
            logger.info("cart_line_removed", book_id=book_id, existed=book_id in cart)
        else:
            logger.info("cart_line_updated", book_id=book_id, quantity=qty)
        return updated

    async def remove(self, book_id: str) -> Cart:
        """Remove a line. Same as ``set_quantity(book_id, 0)``."""
        return await self.set_quantity(book_id, 0)

    async def total_item_count(self) -> int:
        """Sum of all line quantities, from a fresh read."""
        return (await self.read()).total_item_count()

    async def clear(self) -> None:
        """Delete the stored cart entirely."""
        await self._storage.delete(self._key)
        logger.info("cart_cleared")


# =============================================================================
# Summary
# =============================================================================


@dataclass(frozen=True)
class CartSummaryLine:
    """A cart line joined with its catalog record."""

    book: Book
    quantity: int

    @property
    def subtotal(self) -> float:
        return round(self.book.price * self.quantity, 2)


@dataclass(frozen=True)
class CartSummary:
    """Renderable cart contents.

    Lines whose book is missing from the catalog are reported in
    ``orphaned_book_ids`` and left out of ``lines`` and ``total_amount``.
    They still count toward ``total_quantity``, which matches what the cart
    badge shows.
    """

    lines: list[CartSummaryLine]
    orphaned_book_ids: list[str]
    total_quantity: int

    @property
    def total_amount(self) -> float:
        return round(sum(line.subtotal for line in self.lines), 2)

    @property
    def is_empty(self) -> bool:
        return self.total_quantity == 0


def build_cart_summary(cart: Cart, catalog: CatalogRepository) -> CartSummary:
    """Resolve cart lines against the catalog, skipping orphaned ones."""
    lines: list[CartSummaryLine] = []
    orphaned: list[str] = []
    for line in cart:
        book = catalog.get_book(line.book_id)
        if book is None:
            orphaned.append(line.book_id)
            continue
        lines.append(CartSummaryLine(book=book, quantity=line.quantity))

    if orphaned:
        logger.debug("cart_lines_orphaned", book_ids=orphaned)

    return CartSummary(
        lines=lines,
        orphaned_book_ids=orphaned,
        total_quantity=cart.total_item_count(),
    )
