"""
Error taxonomy shared by every analysis endpoint.
Each error carries the HTTP status it maps to and a user-facing message
that is returned next to the raw error text.
"""

from typing import Optional


DEFAULT_FRIENDLY_MESSAGE = "Something went wrong while analyzing your request. Please try again."


class SEOgenixError(Exception):
    """Base class for errors turned into JSON responses"""

    status_code = 500
    friendly_message = DEFAULT_FRIENDLY_MESSAGE

    def __init__(self, message: str, friendly_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if friendly_message:
            self.friendly_message = friendly_message

    def to_payload(self) -> dict:
        return {"error": self.message, "message": self.friendly_message}


class ClientInputError(SEOgenixError):
    """Missing or too-short request fields. Raised before any external call."""

    status_code = 400
    friendly_message = "Some required information is missing. Please check your input and try again."


class EntitlementDenied(SEOgenixError):
    """The caller's plan or usage does not permit the action"""

    status_code = 403
    friendly_message = "This feature is not included in your current plan. Upgrade to unlock it."


class OracleError(SEOgenixError):
    """Text-generation call failed or returned nothing usable"""

    status_code = 500
    friendly_message = "Our AI service is temporarily unavailable. Please try again in a moment."


class UpstreamFetchError(SEOgenixError):
    """Target page could not be fetched. Recovered locally, never sent to the caller."""

    status_code = 502
    friendly_message = "We could not reach that website."
