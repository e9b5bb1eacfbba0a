"""Cart routes.

Every handler works through its own ``CartStore``: it reads the persisted
cart, applies at most one mutation, and renders the result. Nothing about
the cart is kept between requests except what storage holds.
"""

from fastapi import APIRouter, Depends, Response, status

from storefront.adapters import MemoryCatalogRepository
from storefront.api.dependencies import get_cart_store, get_catalog
from storefront.api.schemas import (
    CartCountResponse,
    CartItemCreate,
    CartItemUpdate,
    CartResponse,
)
from storefront.core.cart import Cart, CartStore, build_cart_summary
from storefront.core.logging import bound_context, get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


def _render(cart: Cart, catalog: MemoryCatalogRepository) -> CartResponse:
    return CartResponse.from_summary(build_cart_summary(cart, catalog))


@router.get("", response_model=CartResponse)
async def get_cart(
    cart_store: CartStore = Depends(get_cart_store),
    catalog: MemoryCatalogRepository = Depends(get_catalog),
) -> CartResponse:
    """Current cart contents, resolved against the catalog."""
    return _render(await cart_store.read(), catalog)


@router.get("/count", response_model=CartCountResponse)
async def get_cart_count(
    cart_store: CartStore = Depends(get_cart_store),
) -> CartCountResponse:
    """Total number of items in the cart, for the navbar badge."""
    return CartCountResponse(count=await cart_store.total_item_count())


@router.post("/items", response_model=CartResponse)
async def add_cart_item(
    request: CartItemCreate,
    cart_store: CartStore = Depends(get_cart_store),
    catalog: MemoryCatalogRepository = Depends(get_catalog),
) -> CartResponse:
    """Add a book to the cart, incrementing its line if present.

    Ids that are not in the catalog are still stored; the summary reports
    them as orphaned.
    """
    with bound_context(cart_key=cart_store.key, book_id=request.book_id):
        if catalog.get_book(request.book_id) is None:
            logger.warning("cart_add_unknown_book")
        cart = await cart_store.add_or_increment(request.book_id, request.quantity)
    return _render(cart, catalog)


@router.put("/items/{book_id}", response_model=CartResponse)
async def update_cart_item(
    book_id: str,
    request: CartItemUpdate,
    cart_store: CartStore = Depends(get_cart_store),
    catalog: MemoryCatalogRepository = Depends(get_catalog),
) -> CartResponse:
    """Set a line's quantity exactly; zero or less removes it."""
    with bound_context(cart_key=cart_store.key, book_id=book_id):
        cart = await cart_store.set_quantity(book_id, request.quantity)
    return _render(cart, catalog)


@router.delete("/items/{book_id}", response_model=CartResponse)
async def remove_cart_item(
    book_id: str,
    cart_store: CartStore = Depends(get_cart_store),
    catalog: MemoryCatalogRepository = Depends(get_catalog),
) -> CartResponse:
    """Remove a line. Removing a book that is not in the cart is a no-op."""
    with bound_context(cart_key=cart_store.key, book_id=book_id):
        cart = await cart_store.remove(book_id)
    return _render(cart, catalog)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(cart_store: CartStore = Depends(get_cart_store)) -> Response:
    """Empty the cart."""
    with bound_context(cart_key=cart_store.key):
        await cart_store.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
