"""Washline — API response helpers for the {success, data, message, errors} envelope."""


def error_response(message: str, errors: dict[str, str] | None = None) -> dict:
    return {"success": False, "data": None, "message": message, "errors": errors}
