"""Cart session service: one aggregate per shopper session."""
import asyncio
from collections import OrderedDict
from decimal import Decimal
from typing import Callable, List

from storefront import config
from storefront.logging import get_logger, sanitize_id_for_logging
from . import state as transitions
from .checkout import CheckoutSummary, build_checkout_summary
from .models import CartState, LineItem
from .storage import CartStorage, cart_storage_key, deserialize_cart, serialize_cart

logger = get_logger(__name__)


class CartSession:
    """
    Owns the cart of a single shopper session.

    Storage is the source of truth: every read and every mutation reloads
    the stored cart first, then a mutation applies a pure transition and
    persists the new state, all under the session lock. Storage failures
    are logged and never raised to callers. A corrupt stored value starts
    an empty cart; a failed load keeps the last state this process saw;
    a failed write leaves the in-memory cart intact.
    """

    def __init__(self, session_id: str, storage: CartStorage):
        self.session_id = session_id
        self.key = cart_storage_key(session_id)
        self.storage = storage
        self._state = transitions.EMPTY_CART
        self._lock = asyncio.Lock()
        self.hydrated = False

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> List[LineItem]:
        return list(self._state.items)

    @property
    def item_count(self) -> int:
        return self._state.item_count

    @property
    def total(self) -> Decimal:
        return self._state.total

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def _reload(self) -> None:
        try:
            raw = await self.storage.load(self.key)
        except Exception as e:
            logger.warning(
                f"Failed to load cart for session {sanitize_id_for_logging(self.session_id)}: {e}"
            )
            self.hydrated = True
            return

        self._state = deserialize_cart(raw) or transitions.EMPTY_CART
        self.hydrated = True

    async def hydrate(self) -> CartState:
        """Load the stored cart (derived fields recomputed) and write it back."""
        async with self._lock:
            await self._reload()
            await self._persist()
            return self._state

    async def refresh(self) -> CartState:
        """
        Current stored cart.

        The first load of a session writes the recomputed cart back, later
        loads only read.
        """
        async with self._lock:
            first_load = not self.hydrated
            await self._reload()
            if first_load:
                await self._persist()
            return self._state

    async def persist(self) -> bool:
        """Write the current state to storage. Returns False on failure."""
        async with self._lock:
            return await self._persist()

    async def _persist(self) -> bool:
        try:
            saved = await self.storage.save(self.key, serialize_cart(self._state))
        except Exception as e:
            logger.error(
                f"Failed to persist cart for session {sanitize_id_for_logging(self.session_id)}: {e}",
                exc_info=True,
            )
            return False
        if not saved:
            logger.error(
                f"Cart storage rejected write for session {sanitize_id_for_logging(self.session_id)}"
            )
        return bool(saved)

    async def _apply(self, transition: Callable[..., CartState], *args) -> CartState:
        async with self._lock:
            await self._reload()
            self._state = transition(self._state, *args)
            await self._persist()
            return self._state

    async def add_item(self, item: LineItem) -> CartState:
        return await self._apply(transitions.add_item, item)

    async def remove_item(self, item_id: str) -> CartState:
        return await self._apply(transitions.remove_item, item_id)

    async def update_item_quantity(self, item_id: str, quantity: int) -> CartState:
        return await self._apply(transitions.update_item_quantity, item_id, quantity)

    async def clear_cart(self) -> CartState:
        return await self._apply(transitions.clear_cart)

    async def checkout_summary(self, shipping_fee=0) -> CheckoutSummary:
        """Summary of the stored cart for the payment step."""
        state = await self.refresh()
        return build_checkout_summary(state, shipping_fee)


class CartManager:
    """
    Registry of cart sessions, owned by the application.

    Sessions hold no authoritative state (each access reloads from
    storage), so the registry only keeps one lock per shopper session
    alive for this process. The least recently used idle sessions are
    dropped once `max_sessions` is exceeded.
    """

    def __init__(self, storage: CartStorage, max_sessions: int = config.CART_MAX_SESSIONS):
        self.storage = storage
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, CartSession]" = OrderedDict()

    def get_session(self, session_id: str) -> CartSession:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            return session

        session = CartSession(session_id, self.storage)
        self._sessions[session_id] = session
        logger.info(f"Cart session opened: {sanitize_id_for_logging(session_id)}")
        self._evict_idle(keep=session_id)
        return session

    def _evict_idle(self, keep: str) -> None:
        while len(self._sessions) > self.max_sessions:
            # Oldest first; sessions mid-operation keep their lock
            idle = next(
                (sid for sid, s in self._sessions.items() if sid != keep and not s.busy),
                None,
            )
            if idle is None:
                return
            del self._sessions[idle]

    def __len__(self) -> int:
        return len(self._sessions)
