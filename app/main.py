import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from marmita_ops import config
from marmita_ops.core.classifier import Classifier
from marmita_ops.core.dispatcher import Dispatcher
from marmita_ops.core.gateway import MessageGateway
from marmita_ops.core.ledger import Ledger
from marmita_ops.core.messaging import WppConnectClient
from marmita_ops.db.database import init_db
from app.dependencies import verify_session_token, is_public, SESSION_COOKIE
from app.routers import auth, report, settings, webhook

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
log = logging.getLogger("marmita_ops.app")


def build_gateway(ledger: Ledger) -> MessageGateway:
    """Wire the production services: Claude classifier and WPPConnect replies."""
    dispatcher = Dispatcher(ledger, Classifier())
    return MessageGateway(dispatcher, WppConnectClient(**config.get_wpp_settings()))


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    ledger = Ledger()
    app.state.ledger = ledger
    app.state.gateway = build_gateway(ledger)
    log.info("Bot started, waiting for WhatsApp events on /webhook")
    yield


app = FastAPI(title="Marmita Ops", lifespan=lifespan)


@app.middleware("http")
async def auth_middleware(request: Request, call_next):
    if not is_public(request.url.path):
        token = request.cookies.get(SESSION_COOKIE)
        if not token or not verify_session_token(token):
            return JSONResponse({"detail": "Not authenticated"}, status_code=401)
    return await call_next(request)


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(webhook.router)
app.include_router(report.router)
app.include_router(settings.router)


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=int(os.environ.get("PORT", "8000")), reload=False)
