"""Webhook router: receives WPPConnect events and answers them in the background."""
from fastapi import APIRouter, BackgroundTasks, Body, Depends

from app.dependencies import get_gateway
from marmita_ops.core.gateway import InboundMessage, should_handle

router = APIRouter(prefix="/webhook", tags=["webhook"])


@router.post("")
async def receive_event(
    background_tasks: BackgroundTasks,
    payload: dict = Body(...),
    gateway=Depends(get_gateway),
):
    message = InboundMessage.from_event(payload)
    if not should_handle(message, gateway.owner()):
        return {"status": "ignored"}
    background_tasks.add_task(gateway.handle_event, message)
    return {"status": "accepted"}
