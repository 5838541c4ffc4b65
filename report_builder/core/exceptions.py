"""
Error taxonomy for the query endpoint.

Client-correctable errors (``InvalidQuery``, ``MissingParameter``) surface as
HTTP 400 with an ``{error}`` body. Infrastructure failures (``BackendError``)
surface as HTTP 500 with ``{error, details}``, where ``details`` is a short
non-sensitive string; the full cause is only logged.
"""

from typing import Any, Dict, Optional


class QueryError(Exception):
    """Base class for failures raised by the query dispatcher."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message}


class InvalidQuery(QueryError):
    """The queryName is absent or not one of the recognized queries."""

    def __init__(self, query_name: Optional[str] = None):
        if not query_name:
            message = "Missing required parameter: queryName"
        else:
            message = "Invalid queryName specified."
        super().__init__(message)
        self.query_name = query_name


class MissingParameter(QueryError):
    """A recognized query was called without one of its required parameters."""

    def __init__(self, query_name: str, parameter: str):
        super().__init__(
            f"Missing required parameter for {query_name}: {parameter}"
        )
        self.query_name = query_name
        self.parameter = parameter


class BackendError(QueryError):
    """The warehouse rejected or failed to run the query."""

    status_code = 500

    def __init__(self, details: str, message: str = "Failed to query BigQuery."):
        super().__init__(message)
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}
