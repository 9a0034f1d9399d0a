"""FastAPI application for vietqr."""
from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response

from .config import settings
from .crc import verify_crc
from .logging_conf import configure_logging
from .middleware import RequestLoggingMiddleware, route_path
from .models import ParsedTransaction, PaymentFlow
from .monitoring import metrics_payload, record_decoded, record_service_error
from .schemas import (
    DecodeRequest,
    DecodeResponse,
    GenerateQRRequest,
    GenerateQRResponse,
    ManualAmountRequest,
    TransactionResponse,
)
from .services.errors import ServiceError
from .services.generator import QRGenerator
from .services.payment import PaymentService

app = FastAPI(title="vietqr", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)

logger = logging.getLogger("vietqr.api")


def _warn_insecure_defaults() -> None:
    if settings.api_key == "dev-secret-key":
        logger.warning(
            "api key is using the default value",
            extra={"config_key": "api_key"},
        )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    _warn_insecure_defaults()


async def require_api_key(x_api_key: str = Header(...)) -> None:
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def get_payment_service() -> PaymentService:
    return PaymentService()


def get_generator() -> QRGenerator:
    return QRGenerator()


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    path = route_path(request)
    logger.warning(
        "service error",
        extra={"code": exc.code, "path": path, "method": request.method},
    )
    record_service_error(exc.code, path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled exception",
        extra={"path": route_path(request), "method": request.method},
    )
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


def _transaction_fields(transaction: ParsedTransaction, flow: PaymentFlow) -> dict:
    return {
        "amount": transaction.amount,
        "currency": transaction.currency,
        "full_url": transaction.full_url,
        "original_data": transaction.original_data,
        "tags": transaction.tlv_data,
        "flow": flow,
    }


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/qr", response_model=GenerateQRResponse, tags=["qr"], dependencies=[Depends(require_api_key)])
async def generate_qr(
    payload: GenerateQRRequest,
    generator: QRGenerator = Depends(get_generator),
) -> GenerateQRResponse:
    result = generator.create(
        bank_bin=payload.bank_bin,
        account_number=payload.account_number,
        amount=payload.amount,
        message=payload.message,
        is_one_time=payload.one_time,
        render_image=payload.render_image,
    )

    return GenerateQRResponse(
        payload=result.encoded.payload,
        crc=result.encoded.crc,
        init_method=result.init_method,
        qr_png_base64=result.qr_png_base64,
    )


@app.post("/v1/decode", response_model=DecodeResponse, tags=["scan"], dependencies=[Depends(require_api_key)])
async def decode_payload(
    payload: DecodeRequest,
    service: PaymentService = Depends(get_payment_service),
) -> DecodeResponse:
    transaction = service.resolve(payload=payload.payload, url=payload.url, currency=payload.currency)
    service.validate_transaction(transaction)
    flow = service.determine_flow(transaction.amount)
    crc_valid = verify_crc(transaction.original_data)
    record_decoded(flow.value, crc_valid)

    return DecodeResponse(**_transaction_fields(transaction, flow), crc_valid=crc_valid)


@app.post(
    "/v1/payments/manual",
    response_model=TransactionResponse,
    tags=["scan"],
    dependencies=[Depends(require_api_key)],
)
async def manual_amount(
    payload: ManualAmountRequest,
    service: PaymentService = Depends(get_payment_service),
) -> TransactionResponse:
    transaction = service.manual_transaction(payload.amount, currency=payload.currency)
    service.validate_transaction(transaction)
    flow = service.determine_flow(transaction.amount)

    return TransactionResponse(**_transaction_fields(transaction, flow))
