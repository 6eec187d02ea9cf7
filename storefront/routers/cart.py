"""
Cart Router

Shopping cart endpoints for one shopper session, identified by the
X-Cart-Session header.

Response format:
- items, itemCount, total: the persisted cart shape
- formattedTotal, currency: display values for the cart badge and panel
"""
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request

from storefront import config
from storefront.cart import CartManager, CartSession, CartState, LineItem, make_line_item_id
from storefront.errors import CartError, ERROR_INTERNAL, ERROR_SESSION_REQUIRED
from storefront.logging import get_logger
from storefront.services.money import format_money
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_cart_manager(request: Request) -> CartManager:
    """CartManager created in the app lifespan."""
    return request.app.state.cart_manager


async def get_cart_session(
    x_cart_session: str | None = Header(default=None),
    manager: CartManager = Depends(get_cart_manager),
) -> CartSession:
    session_id = (x_cart_session or "").strip()
    if not session_id:
        raise HTTPException(status_code=400, detail=ERROR_SESSION_REQUIRED)
    return manager.get_session(session_id)


def _format_cart_response(state: CartState) -> dict:
    response = state.to_dict()
    response["formattedTotal"] = format_money(state.total, config.CART_CURRENCY)
    response["currency"] = config.CART_CURRENCY
    return response


@router.get("")
async def get_cart(session: CartSession = Depends(get_cart_session)):
    """Get the shopper's cart."""
    state = await session.refresh()
    return _format_cart_response(state)


@router.post("/items")
async def add_to_cart(request: AddToCartRequest, session: CartSession = Depends(get_cart_session)):
    """Add a line (same id merges into the existing row)."""
    item = LineItem(
        id=request.id or make_line_item_id(request.product_id, request.size, request.color),
        product_id=request.product_id,
        name=request.name,
        price=request.price,
        image=request.image,
        size=request.size,
        color=request.color,
        quantity=request.quantity,
    )
    state = await session.add_item(item)
    return _format_cart_response(state)


@router.patch("/items/{item_id}")
async def update_cart_item(
    item_id: str,
    request: UpdateCartItemRequest,
    session: CartSession = Depends(get_cart_session),
):
    """Set a line's quantity (below 1 = remove)."""
    state = await session.update_item_quantity(item_id, request.quantity)
    return _format_cart_response(state)


@router.delete("/items/{item_id}")
async def remove_cart_item(item_id: str, session: CartSession = Depends(get_cart_session)):
    """Remove a line. Unknown ids are ignored."""
    state = await session.remove_item(item_id)
    return _format_cart_response(state)


@router.delete("")
async def clear_cart(session: CartSession = Depends(get_cart_session)):
    """Empty the cart (checkout completed or user reset)."""
    state = await session.clear_cart()
    return _format_cart_response(state)


@router.get("/checkout")
async def get_checkout_summary(
    shipping_fee: float = Query(0.0, allow_inf_nan=False),
    session: CartSession = Depends(get_cart_session),
):
    """Checkout summary: lines, subtotal, shipping fee, total and minor-unit amount."""
    try:
        summary = await session.checkout_summary(shipping_fee)
        response = summary.to_dict()
    except (CartError, ValueError, ArithmeticError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to build checkout summary: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_INTERNAL)

    response["formattedTotal"] = format_money(summary.total_amount, config.CART_CURRENCY)
    response["currency"] = config.CART_CURRENCY
    return response
