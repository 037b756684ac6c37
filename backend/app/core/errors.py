"""Shared error helpers."""
from dataclasses import dataclass


@dataclass
class APIError(Exception):
    code: str
    message: str
    status_code: int = 400
    detail: dict | None = None


def error_body(code: str, message: str, request_id: str, detail=None) -> dict:
    body = {"code": code, "message": message, "request_id": request_id}
    if detail is not None:
        body["detail"] = detail
    return body
