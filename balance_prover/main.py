"""
Balance Prover API - HTTP service for balance proofs.

Provides REST endpoints for:
- Generating proofs (POST /balance/proof)
- Verifying proofs (POST /balance/verify)
- Batch generation (POST /balance/proofs/batch)
- Listing issued proofs (GET /balance/proofs)
- Status and health checks (GET /status, GET /health)
"""

import asyncio
import itertools
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .auth import verify_api_token
from .cache import ProofCache
from .config import Settings, get_settings
from .errors import ProofError
from .models import (
    BalanceProofModel,
    BalanceProofRequest,
    BalanceProofResponse,
    BatchProofRequest,
    BatchProofResponse,
    HealthResponse,
    StatusResponse,
    StoredProofInfo,
    VerifyProofRequest,
    VerifyProofResponse,
)
from .proof import ProofEngine
from .store import ProofStore

SERVICE_NAME = "zkp-prover-balance"

# Configure logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()


# Global state (initialized at startup)
_engine: ProofEngine | None = None
_store: ProofStore | None = None
_request_counter = itertools.count()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    global _engine, _store, _request_counter

    settings = get_settings()
    logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

    _engine = ProofEngine(
        ProofCache(
            ttl_seconds=settings.cache_ttl_seconds,
            lock_timeout=settings.cache_lock_timeout,
        )
    )
    _store = ProofStore()
    _request_counter = itertools.count()

    logger.info(
        "Prover service started",
        version=__version__,
        host=settings.host,
        port=settings.port,
        cache_ttl_seconds=settings.cache_ttl_seconds,
        cleanup_interval=settings.cleanup_interval,
    )

    yield

    _engine = None
    _store = None
    logger.info("Prover service stopped")


app = FastAPI(
    title="Balance Prover API",
    description="Hash-based proofs that a committed balance exceeds a transfer amount",
    version=__version__,
    lifespan=lifespan,
)


_settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _require_state() -> tuple[ProofEngine, ProofStore]:
    if _engine is None or _store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Proof engine not initialized",
        )
    return _engine, _store


# ============================================================================
# Health / Status
# ============================================================================


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(status="healthy", service=SERVICE_NAME, version=__version__)


@app.get("/status", response_model=StatusResponse)
async def service_status() -> StatusResponse:
    """Service status and number of issued proofs."""
    _, store = _require_state()
    return StatusResponse(status="running", generated_proofs=len(store))


# ============================================================================
# Proof Generation
# ============================================================================


@app.post(
    "/balance/proof",
    response_model=BalanceProofResponse,
    dependencies=[Depends(verify_api_token)],
)
async def generate_balance_proof(
    request: BalanceProofRequest,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
) -> BalanceProofResponse | JSONResponse:
    """
    Generate a proof that the committed balance exceeds `amount`.

    Expired cache entries are dropped every `cleanup_interval` requests.
    Engine calls run in a worker thread since cache access may wait on its lock.
    """
    engine, store = _require_state()

    if next(_request_counter) % settings.cleanup_interval == 0:
        await asyncio.to_thread(engine.cleanup_cache)

    logger.debug("Generating balance proof", user_address=request.user_address, amount=request.amount)

    try:
        proof = await asyncio.to_thread(engine.generate, request.to_request())
    except ProofError as e:
        logger.error("Failed to generate balance proof", error=str(e), user_address=request.user_address)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=BalanceProofResponse(
                success=False,
                message=f"Failed to generate proof: {e}",
            ).model_dump(),
        )

    logger.debug("Balance proof generated", proof=str(proof))
    background_tasks.add_task(store.add, proof)

    return BalanceProofResponse(
        success=True,
        proof=BalanceProofModel.from_proof(proof),
        message="Balance proof generated successfully",
    )


# ============================================================================
# Proof Verification
# ============================================================================


@app.post(
    "/balance/verify",
    response_model=VerifyProofResponse,
    dependencies=[Depends(verify_api_token)],
)
async def verify_balance_proof(request: VerifyProofRequest) -> VerifyProofResponse | JSONResponse:
    """
    Verify a balance proof.

    A proof that does not hold is reported with `verified=false`; a
    commitment that cannot be decoded is a 400.
    """
    engine, _ = _require_state()

    try:
        verified = await asyncio.to_thread(
            engine.verify,
            request.proof.to_proof(),
            request.balance_commitment,
            request.secret_nonce,
        )
    except ProofError as e:
        logger.error("Error verifying proof", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=VerifyProofResponse(
                success=False,
                verified=False,
                message=f"Verification error: {e}",
            ).model_dump(),
        )

    if verified:
        logger.info("Balance proof verified", amount=request.proof.public_inputs.amount)
        return VerifyProofResponse(success=True, verified=True, message="Proof verified successfully")

    logger.warning("Balance proof verification failed", amount=request.proof.public_inputs.amount)
    return VerifyProofResponse(success=True, verified=False, message="Proof verification failed")


# ============================================================================
# Issued Proofs
# ============================================================================


@app.get("/balance/proofs", response_model=list[StoredProofInfo])
async def list_proofs() -> list[StoredProofInfo]:
    """List all proofs issued since startup."""
    _, store = _require_state()
    return [StoredProofInfo.from_proof(p) for p in store.all()]


# ============================================================================
# Batch Generation
# ============================================================================


@app.post(
    "/balance/proofs/batch",
    response_model=BatchProofResponse,
    dependencies=[Depends(verify_api_token)],
)
async def generate_batch_proofs(
    request: BatchProofRequest,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
) -> BatchProofResponse | JSONResponse:
    """
    Generate proofs for many requests concurrently.

    Results are returned in request order; each slot holds either a proof
    or an error.
    """
    engine, store = _require_state()

    logger.debug("Generating batch proofs", count=len(request.requests))

    if len(request.requests) > settings.max_batch_size:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=BatchProofResponse(
                success=False,
                proofs=[],
                errors=[f"Batch size too large (max {settings.max_batch_size})"],
                message="Batch size exceeds limit",
            ).model_dump(),
        )

    results = await asyncio.gather(
        *(asyncio.to_thread(engine.generate, r.to_request()) for r in request.requests),
        return_exceptions=True,
    )

    proofs: list[BalanceProofModel | None] = []
    errors: list[str | None] = []
    for result in results:
        if isinstance(result, ProofError):
            proofs.append(None)
            errors.append(str(result))
        elif isinstance(result, BaseException):
            proofs.append(None)
            errors.append(f"Task error: {result}")
        else:
            background_tasks.add_task(store.add, result)
            proofs.append(BalanceProofModel.from_proof(result))
            errors.append(None)

    success_count = sum(1 for p in proofs if p is not None)
    logger.info(
        "Batch proof generation completed",
        successful=success_count,
        total=len(request.requests),
    )

    return BatchProofResponse(
        success=success_count > 0,
        proofs=proofs,
        errors=errors,
        message=f"Generated {success_count} proofs successfully",
    )


# ============================================================================
# Entry Point
# ============================================================================


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "balance_prover.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
