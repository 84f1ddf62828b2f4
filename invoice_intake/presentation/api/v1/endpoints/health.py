"""Health check endpoint — always available."""

from fastapi import APIRouter, Depends

from invoice_intake.infrastructure.dependencies import InvoiceRuntime, get_runtime

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(runtime: InvoiceRuntime = Depends(get_runtime)) -> dict:
    """Returns the current application health status."""
    settings = runtime.settings
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "invoiceCount": await runtime.repository.count(),
        "processingInFlight": runtime.processor.pending_count,
    }
