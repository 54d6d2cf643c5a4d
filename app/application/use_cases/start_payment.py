import logging
from dataclasses import dataclass

from app.application.interfaces.catalog_query import CatalogQuery
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRecord, ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.user_repo import UserRecord
from app.application.lifecycle_manager import ReservationLifecycleManager
from app.domain.enums import LifecycleEvent, PaymentStatus
from app.domain.errors import ForbiddenError, InvalidTransitionError, NotFoundError
from app.domain.lifecycle import can_apply


@dataclass
class CheckoutStarted:
    session_id: str
    url: str | None


@dataclass
class PaymentIntentStarted:
    payment_intent_id: str
    client_secret: str | None


async def _load_payable_reservation(
    reservation_repo: ReservationRepo, reservation_id: int, user: UserRecord
) -> ReservationRecord:
    reservation = await reservation_repo.get(reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation", reservation_id)
    if reservation.customer_id != user.id:
        raise ForbiddenError()
    if not can_apply(reservation.status, LifecycleEvent.CHECKOUT_STARTED):
        raise InvalidTransitionError(reservation.id, reservation.status, LifecycleEvent.CHECKOUT_STARTED.value)
    return reservation


class CreateCheckoutSessionUseCase:
    """Abre una sesión de Stripe Checkout para una reservación del usuario."""

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        catalog_query: CatalogQuery,
        payment_gateway: PaymentGateway,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
        currency: str = "usd",
    ) -> None:
        self._reservation_repo = reservation_repo
        self._catalog_query = catalog_query
        self._payment_gateway = payment_gateway
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._currency = currency
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        reservation_id: int,
        development_id: int,
        user: UserRecord,
        origin: str,
    ) -> CheckoutStarted:
        reservation = await _load_payable_reservation(self._reservation_repo, reservation_id, user)
        development = await self._catalog_query.get_development(development_id)
        if development is None:
            raise NotFoundError("Development", development_id)

        base_url = origin.rstrip("/")
        session = await self._payment_gateway.create_checkout_session(
            amount=reservation.total_price,
            currency=reservation.currency or self._currency,
            reservation_id=reservation.id,
            user_id=user.id,
            email=user.email,
            name=user.name,
            product_name=development["name_key"],
            success_url=f"{base_url}/reservation/{reservation.id}/success",
            cancel_url=f"{base_url}/reservation/{reservation.id}/payment",
        )

        async with self._transaction_manager.start():
            await self._lifecycle.transition(
                reservation.id,
                LifecycleEvent.CHECKOUT_STARTED,
                actor_id=user.id,
                reason=f"checkout session {session.session_id}",
            )

        self._logger.info(
            "Checkout session created",
            extra={"reservation_id": reservation.id, "session_id": session.session_id},
        )
        return CheckoutStarted(session_id=session.session_id, url=session.url)


class CreatePaymentIntentUseCase:
    """Crea un PaymentIntent y su fila de pago pendiente."""

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        payment_gateway: PaymentGateway,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
        currency: str = "usd",
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._payment_gateway = payment_gateway
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._currency = currency
        self._logger = logging.getLogger(__name__)

    async def execute(self, reservation_id: int, user: UserRecord) -> PaymentIntentStarted:
        reservation = await _load_payable_reservation(self._reservation_repo, reservation_id, user)

        intent = await self._payment_gateway.create_payment_intent(
            amount=reservation.total_price,
            currency=reservation.currency or self._currency,
            reservation_id=reservation.id,
            user_id=user.id,
            email=user.email,
        )

        async with self._transaction_manager.start():
            await self._payment_repo.create(
                reservation_id=reservation.id,
                customer_id=user.id,
                amount=reservation.total_price,
                currency=intent.currency,
                status=PaymentStatus.PENDING.value,
                external_payment_id=intent.payment_intent_id,
            )
            await self._reservation_repo.update_fields(
                reservation.id, payment_intent_id=intent.payment_intent_id
            )
            await self._lifecycle.transition(
                reservation.id,
                LifecycleEvent.CHECKOUT_STARTED,
                actor_id=user.id,
                reason=f"payment intent {intent.payment_intent_id}",
            )

        self._logger.info(
            "Payment intent created",
            extra={"reservation_id": reservation.id, "payment_intent_id": intent.payment_intent_id},
        )
        return PaymentIntentStarted(payment_intent_id=intent.payment_intent_id, client_secret=intent.client_secret)
