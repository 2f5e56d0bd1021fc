"""Service-level failures, rendered as {success: false, code, message} by app.main."""


class ServiceError(Exception):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(ServiceError):
    code = "VALIDATION_ERROR"
    status_code = 400


class Unauthenticated(ServiceError):
    code = "UNAUTHENTICATED"
    status_code = 401


class Forbidden(ServiceError):
    code = "FORBIDDEN"
    status_code = 403


class NotFound(ServiceError):
    code = "NOT_FOUND"
    status_code = 404


class Conflict(ServiceError):
    code = "CONFLICT"
    status_code = 409


class UpstreamUnavailable(ServiceError):
    code = "UPSTREAM_UNAVAILABLE"
    status_code = 503


# HTTP status -> taxonomy code, for HTTPExceptions raised outside the services
CODE_BY_STATUS = {
    cls.status_code: cls.code
    for cls in (ValidationFailed, Unauthenticated, Forbidden, NotFound, Conflict, UpstreamUnavailable)
}
