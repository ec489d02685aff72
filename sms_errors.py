"""Errors raised by the OneWaySMS gateway client."""

from enum import Enum
from http.client import responses


class ErrorCode(str, Enum):
    """Classification of a non-success gateway response."""

    REQUEST_FAILURE = "RequestFailure"
    INVALID_CREDENTIALS = "InvalidCredentials"
    INVALID_SENDER_ID = "InvalidSenderID"
    INVALID_MOBILE_NO = "InvalidMobileNo"
    INVALID_LANGUAGE_TYPE = "InvalidLanguageType"
    INVALID_MESSAGE_CHARACTERS = "InvalidMessageCharacters"
    INSUFFICIENT_CREDIT_BALANCE = "InsufficientCreditBalance"
    MT_INVALID_NOT_FOUND = "MTInvalidNotFound"
    MESSAGE_DELIVERY_FAILURE = "MessageDeliveryFailure"
    UNKNOWN_ERROR = "UnknownError"


MESSAGES = {
    ErrorCode.REQUEST_FAILURE: "request failure",
    ErrorCode.INVALID_CREDENTIALS: "apiusername or apipassword is invalid",
    ErrorCode.INVALID_SENDER_ID: "senderid parameter is invalid",
    ErrorCode.INVALID_MOBILE_NO: "mobileno parameter is invalid",
    ErrorCode.INVALID_LANGUAGE_TYPE: "languagetype is invalid",
    ErrorCode.INVALID_MESSAGE_CHARACTERS: "characters in message are invalid",
    ErrorCode.INSUFFICIENT_CREDIT_BALANCE: "insufficient credit balance",
    ErrorCode.MT_INVALID_NOT_FOUND: "mtid is invalid or not found",
    ErrorCode.MESSAGE_DELIVERY_FAILURE: "message delivery failed",
    ErrorCode.UNKNOWN_ERROR: "unknown error",
}


class SMSError(Exception):
    """Base class for errors raised by this SDK."""


class ValidationError(SMSError, ValueError):
    """Input rejected locally, before any request is made."""

    def __init__(self, input_name: str, field: str, problem: str = "is required"):
        self.field = field
        self.message = f"{input_name}: Error: {field} {problem}"
        super().__init__(self.message)


class GatewayError(SMSError):
    """
    Non-success response from the gateway.

    Switch on ``code`` rather than matching ``message``.
    """

    def __init__(self, code: ErrorCode, message: str, status_code: int):
        self.code = ErrorCode(code)
        self.message = message
        self.status_code = status_code
        super().__init__(str(self))

    @classmethod
    def from_code(cls, code: ErrorCode, status_code: int) -> "GatewayError":
        return cls(code, MESSAGES[ErrorCode(code)], status_code)

    def __str__(self):
        reason = responses.get(self.status_code, "")
        return f"OneWaySMS: Error {self.status_code} ({reason}): {self.message}"

    def __repr__(self):
        return (
            f"GatewayError(code={self.code.value!r}, message={self.message!r}, "
            f"status_code={self.status_code})"
        )
