"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from invoice_intake.presentation.api.v1.endpoints.health import router as health_router
from invoice_intake.presentation.api.v1.invoices_controller import router as invoices_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(invoices_router)
