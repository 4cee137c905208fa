from typing import Optional


class ServiceError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationFailed(ServiceError):
    """Input is well-formed but breaks a business rule."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, fields: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["fields"] = [
            {"field": name, "message": detail} for name, detail in self.fields.items()
        ]
        return payload


class NotAuthenticated(ServiceError):
    status_code = 401
    default_message = "Not authenticated"


class AccessDenied(ServiceError):
    status_code = 403
    default_message = "Access denied"


class RecordNotFound(ServiceError):
    status_code = 404
    default_message = "Record not found"


__all__ = [
    "AccessDenied",
    "NotAuthenticated",
    "RecordNotFound",
    "ServiceError",
    "ValidationFailed",
]
