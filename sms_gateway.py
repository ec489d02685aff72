"""OneWaySMS HTTP API client."""

import logging
import re
import threading
from urllib.parse import urlencode

import requests

from sms_errors import ErrorCode, GatewayError
from sms_types import (
    CheckBalanceOutput,
    CheckStatusInput,
    CheckStatusOutput,
    ClientConfig,
    LanguageType,
    SendMessageInput,
    SendMessageOutput,
    TransactionStatus,
    message_to_hex,
)

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

SEND_PATH = "api.aspx"
STATUS_PATH = "bulktrx.aspx"
BALANCE_PATH = "bulkcredit.aspx"

SEND_ERRORS = {
    -100: ErrorCode.INVALID_CREDENTIALS,
    -200: ErrorCode.INVALID_SENDER_ID,
    -300: ErrorCode.INVALID_MOBILE_NO,
    -400: ErrorCode.INVALID_LANGUAGE_TYPE,
    -500: ErrorCode.INVALID_MESSAGE_CHARACTERS,
    -600: ErrorCode.INSUFFICIENT_CREDIT_BALANCE,
}

STATUS_RESULTS = {
    0: TransactionStatus.SUCCESS,
    100: TransactionStatus.TELCO_DELIVERED,
}

STATUS_ERRORS = {
    -100: ErrorCode.MT_INVALID_NOT_FOUND,
    -200: ErrorCode.MESSAGE_DELIVERY_FAILURE,
}

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_int(text: str) -> int:
    """Parse a trimmed decimal integer, rejecting anything int() is lenient about."""
    text = text.strip()
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def parse_float(text: str) -> float:
    """Parse a trimmed ASCII decimal number; no underscores, inf or nan."""
    text = text.strip()
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"invalid number: {text!r}")
    return float(text)


class GatewayClient:
    """
    OneWaySMS gateway client.

    Based on the HTTP API described at http://smsd2.onewaysms.sg/api.pdf.
    """

    def __init__(self, config: ClientConfig, session=None, timeout: float = 10):
        """
        Initialize gateway client.

        Args:
            config: Gateway URL, credentials and sender ID
            session: Object with a requests-style get(), used as given from every
                thread; defaults to one requests.Session per calling thread
            timeout: Seconds passed to every request
        """
        self.config = config
        self._session = session
        self._local = threading.local()
        self.timeout = timeout
        self.headers = {"User-Agent": f"oneway-sms/{__version__}"}

    @property
    def session(self):
        if self._session is not None:
            return self._session
        # requests.Session is not thread-safe, so each thread gets its own
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def build_url(self, path: str, params: dict) -> str:
        base_url = self.config.base_url.rstrip("/")
        return f"{base_url}/{path}?{urlencode(sorted(params.items()))}"

    def build_send_url(self, sms_input: SendMessageInput) -> str:
        language_type = sms_input.resolve_language_type()
        message = sms_input.message
        if language_type is LanguageType.UNICODE:
            message = message_to_hex(message)

        return self.build_url(SEND_PATH, {
            "apiusername": self.config.api_username,
            "apipassword": self.config.api_password,
            "senderid": self.config.sender_id,
            "mobileno": ",".join(sms_input.mobile_no),
            "languagetype": language_type.value,
            "message": message,
        })

    def build_status_url(self, status_input: CheckStatusInput) -> str:
        return self.build_url(STATUS_PATH, {"mtid": str(status_input.mt_id)})

    def build_balance_url(self) -> str:
        return self.build_url(BALANCE_PATH, {
            "apiusername": self.config.api_username,
            "apipassword": self.config.api_password,
        })

    def _get(self, url: str, path: str):
        # url carries credentials, so only the endpoint path is logged
        try:
            return self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request to {path} failed: {e}")
            raise

    def _fail(self, code: ErrorCode, status_code: int, path: str) -> GatewayError:
        error = GatewayError.from_code(code, status_code)
        logger.warning(f"{path} returned {error.code.value} (HTTP {status_code})")
        return error

    def send_message(self, sms_input: SendMessageInput) -> SendMessageOutput:
        """
        Send an SMS to one or more recipients.

        The language type is detected from the message unless set on the input.

        Args:
            sms_input: Message, recipients and optional language type

        Returns:
            SendMessageOutput with one MT ID per accepted recipient

        Raises:
            ValidationError: input is malformed, nothing was sent
            GatewayError: gateway rejected the request
            requests.RequestException: transport failure
        """
        sms_input.validate()
        response = self._get(self.build_send_url(sms_input), SEND_PATH)

        if response.status_code != 200:
            raise self._fail(ErrorCode.REQUEST_FAILURE, response.status_code, SEND_PATH)

        try:
            mt_ids = [parse_int(part) for part in response.text.split(",")]
        except ValueError:
            raise self._fail(ErrorCode.UNKNOWN_ERROR, response.status_code, SEND_PATH)
        if not mt_ids:
            raise self._fail(ErrorCode.UNKNOWN_ERROR, response.status_code, SEND_PATH)

        # A positive first value means MT IDs, anything else is an error code
        if mt_ids[0] > 0:
            logger.info(f"SMS sent to {len(sms_input.mobile_no)} recipient(s): {mt_ids}")
            return SendMessageOutput(mt_ids=mt_ids)

        code = SEND_ERRORS.get(mt_ids[0], ErrorCode.UNKNOWN_ERROR)
        raise self._fail(code, response.status_code, SEND_PATH)

    def check_transaction_status(self, status_input: CheckStatusInput) -> CheckStatusOutput:
        """
        Check delivery status of a sent message by its MT ID.

        Raises:
            ValidationError: MT ID is zero
            GatewayError: MT ID unknown, delivery failed, or unexpected response
            requests.RequestException: transport failure
        """
        status_input.validate()
        response = self._get(self.build_status_url(status_input), STATUS_PATH)

        try:
            value = parse_int(response.text)
        except ValueError:
            raise self._fail(ErrorCode.UNKNOWN_ERROR, response.status_code, STATUS_PATH)

        if value in STATUS_RESULTS:
            status = STATUS_RESULTS[value]
            logger.info(f"MT {status_input.mt_id} status: {status.value}")
            return CheckStatusOutput(status=status)

        code = STATUS_ERRORS.get(value, ErrorCode.UNKNOWN_ERROR)
        raise self._fail(code, response.status_code, STATUS_PATH)

    def check_credit_balance(self) -> CheckBalanceOutput:
        """
        Check remaining credit balance for the configured account.

        Raises:
            GatewayError: invalid credentials or unexpected response
            requests.RequestException: transport failure
        """
        response = self._get(self.build_balance_url(), BALANCE_PATH)

        try:
            balance = parse_float(response.text)
        except ValueError:
            raise self._fail(ErrorCode.UNKNOWN_ERROR, response.status_code, BALANCE_PATH)

        if balance >= 0:
            logger.info(f"Credit balance: {balance}")
            return CheckBalanceOutput(credit_balance=balance)

        if balance == -100:
            raise self._fail(ErrorCode.INVALID_CREDENTIALS, response.status_code, BALANCE_PATH)
        raise self._fail(ErrorCode.UNKNOWN_ERROR, response.status_code, BALANCE_PATH)


if __name__ == "__main__":
    import os

    # Test with environment variables
    logging.basicConfig(level=logging.INFO)
    client = GatewayClient(ClientConfig(
        os.getenv("ONEWAY_BASE_URL", "http://gateway.onewaysms.sg:10002"),
        os.getenv("ONEWAY_API_USERNAME", ""),
        os.getenv("ONEWAY_API_PASSWORD", ""),
        os.getenv("ONEWAY_SENDER_ID", ""),
    ))
    print(client.check_credit_balance())
