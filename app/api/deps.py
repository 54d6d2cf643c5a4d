from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.clock import Clock, SystemClock
from app.application.interfaces.object_storage import ObjectStorage
from app.application.interfaces.payment_gateway import PaymentGateway


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    # El sessionmaker se construye en el lifespan de la app.
    async with request.app.state.sessionmaker() as session:
        yield session


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


def get_object_storage(request: Request) -> ObjectStorage:
    return request.app.state.object_storage


def get_clock() -> Clock:
    return SystemClock()
