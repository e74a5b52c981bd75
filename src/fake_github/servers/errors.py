ExtraInfoType = dict[str, str | None]

BAD_REQUEST = 400
NOT_FOUND = 404
UNPROCESSABLE_ENTITY = 422


class ServerError(Exception):
    """A request error from the fake GitHub server."""

    status_code: int = BAD_REQUEST
    reason: str = "Bad Request"

    def __init__(self, message: str | None = None, extra_info: ExtraInfoType | None = None):
        msg = message or self.reason
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(msg)


class MalformedPathError(ServerError):
    """A path segment that should be numeric is not."""

    def __init__(self, segment: str, value: str):
        super().__init__(extra_info={"segment": segment, "value": value})


class ProblemsParsingJSONError(ServerError):
    """The request body is not valid JSON."""

    reason = "Problems parsing JSON"


class ResourceNotFoundError(ServerError):
    """The requested resource does not exist."""

    status_code = NOT_FOUND
    reason = "Not Found"

    def __init__(self, resource: str | None = None, extra_info: ExtraInfoType | None = None):
        if not extra_info:
            extra_info = {}
        super().__init__(extra_info={"resource": resource, **extra_info})


class ValidationFailedError(ServerError):
    """The request body does not have the expected shape."""

    status_code = UNPROCESSABLE_ENTITY
    reason = "Validation Failed"

    def __init__(self, resource: str, errors: str):
        super().__init__(extra_info={"resource": resource, "errors": errors})
