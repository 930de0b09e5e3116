# tiendapos/core/errors.py
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """
    Error de negocio con código estable.

    El cliente lee `code`, `message` y los datos adicionales (items,
    violations, usuarios, ...) en el primer nivel del cuerpo JSON.
    """
    code = "ERROR"

    def __init__(self, status_code: int, message: str, code: Optional[str] = None, **payload: Any):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        if code:
            self.code = code
        self.payload = payload

    def to_dict(self) -> Dict[str, Any]:
        body = {"ok": False, "code": self.code, "message": self.message}
        body.update(self.payload)
        return body


class ValidationError(ApiError):
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, **payload: Any):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, **payload)


class NotFoundError(ApiError):
    code = "NOT_FOUND"

    def __init__(self, message: str = "Recurso no encontrado"):
        super().__init__(status.HTTP_404_NOT_FOUND, message)


class ConflictError(ApiError):
    code = "CONFLICT"

    def __init__(self, message: str, **payload: Any):
        super().__init__(status.HTTP_409_CONFLICT, message, **payload)


class StockInsufficientError(ApiError):
    code = "STOCK_NOT_ENOUGH"

    def __init__(self, items: List[Dict[str, Any]], message: str = "Stock insuficiente para registrar la operación."):
        super().__init__(status.HTTP_409_CONFLICT, message, items=items)


class MinStockBreachError(ApiError):
    code = "MIN_STOCK_BREACH"

    def __init__(self, violations: List[Dict[str, Any]], message: str = "Hay productos que quedarían bajo el stock mínimo."):
        super().__init__(status.HTTP_409_CONFLICT, message, violations=violations)


class MaxStockBreachError(ApiError):
    code = "MAX_STOCK_BREACH"

    def __init__(self, violations: List[Dict[str, Any]], message: str = "Hay productos que superarían el stock máximo."):
        super().__init__(status.HTTP_409_CONFLICT, message, violations=violations)


class ServerError(ApiError):
    code = "SERVER_ERROR"

    def __init__(self, message: str = "Error interno del servidor"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def setup_exception_handlers(app: FastAPI):
    """Registrar los manejadores que producen el cuerpo plano {ok, code, message}"""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.code}: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} - {exc.code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        message = str(first.get("msg", "Datos inválidos")).removeprefix("Value error, ")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "ok": False,
                "code": ValidationError.code,
                "message": message,
                "errors": [
                    {"loc": list(e.get("loc", [])), "msg": str(e.get("msg", ""))}
                    for e in errors
                ],
            },
        )
