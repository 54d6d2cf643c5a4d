from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import get_use_cases
from app.infrastructure.db.retry import retry_on_deadlock

router = APIRouter()


@router.post("/webhooks/stripe", status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    use_cases=Depends(get_use_cases),
) -> dict:
    # La firma se calcula sobre el cuerpo crudo; no parsear antes.
    raw_body = await request.body()
    signature = request.headers.get("Stripe-Signature")
    return await retry_on_deadlock(
        lambda: use_cases["handle_webhook"].execute(raw_body=raw_body, signature=signature)
    )
