"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from goldium.config import get_settings
from goldium.services.wallet import WalletFacade, build_wallet


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    yield
    # Shutdown
    await app.state.wallet.close()


def get_wallet(request: Request) -> WalletFacade:
    """Dependency returning the application's wallet services."""
    return request.app.state.wallet


def create_app(wallet: Optional[WalletFacade] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Goldium API",
        description="SOL/GOLD wallet, exchange and transaction history API",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.wallet = wallet or build_wallet(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from goldium.api.routes import balances, health, swaps, transactions, wallet as wallet_routes

    app.include_router(health.router, tags=["Health"])
    app.include_router(balances.router, prefix="/api/v1", tags=["Balances"])
    app.include_router(swaps.router, prefix="/api/v1", tags=["Swaps"])
    app.include_router(transactions.router, prefix="/api/v1", tags=["Transactions"])
    app.include_router(wallet_routes.router, prefix="/api/v1", tags=["Wallet"])

    return app
