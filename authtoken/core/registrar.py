"""Registrar for FastAPI application setup."""

from fastapi import FastAPI, HTTPException

from authtoken.core.errors import TokenError, http_error_handler, token_error_handler


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(HTTPException, http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(TokenError, token_error_handler)  # type: ignore[arg-type]
