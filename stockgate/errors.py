from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockgate.schemas import ErrorResponse


def http_error(message: str, http_status=status.HTTP_400_BAD_REQUEST) -> HTTPException:
    return HTTPException(status_code=http_status, detail=message)


def envelope_from_http_exception(exc: StarletteHTTPException) -> ErrorResponse:
    return ErrorResponse(error=str(exc.detail))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error (ours and the router's 404/405) as {"error": "<message>"}."""
    body = envelope_from_http_exception(exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(),
        headers=getattr(exc, "headers", None),
    )
