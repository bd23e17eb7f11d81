# backend/services/errors.py
from typing import Optional


class WeatherServiceError(Exception):
    status_code = 500
    code = 'INTERNAL_ERROR'


class InvalidRequest(WeatherServiceError):
    status_code = 400
    code = 'INVALID_REQUEST'


class RequestTimeout(WeatherServiceError):
    status_code = 408
    code = 'REQUEST_TIMEOUT'


class UpstreamConnectionError(WeatherServiceError):
    status_code = 503
    code = 'SERVICE_UNAVAILABLE'


class MalformedResponse(WeatherServiceError):
    code = 'MALFORMED_RESPONSE'


class UpstreamError(WeatherServiceError):
    """Provider answered with a non-2xx status.

    ``body`` holds the raw upstream text for logging; it is never sent back
    to the caller.
    """

    code = 'UPSTREAM_ERROR'

    def __init__(self, status_code: int, body: Optional[str] = None):
        super().__init__(f"Upstream responded with status {status_code}")
        self.status_code = status_code
        self.body = body or ''
