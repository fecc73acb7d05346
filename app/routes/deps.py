from fastapi import Request

from app.services.error_log import ErrorLog


def get_error_log(request: Request) -> ErrorLog:
    """The process-wide error log created by the server."""
    return request.app.state.error_log
