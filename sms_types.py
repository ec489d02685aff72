"""Request and response value objects for the OneWaySMS gateway."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from sms_errors import ValidationError


class LanguageType(str, Enum):
    """SMS language type as sent in the ``languagetype`` parameter."""

    NORMAL = "1"   # 160 characters per MT
    UNICODE = "2"  # 70 characters per MT


class TransactionStatus(str, Enum):
    """Delivery status of a mobile terminating transaction."""

    SUCCESS = "success"
    TELCO_DELIVERED = "telco_delivered"


def detect_language_type(message: str) -> LanguageType:
    """
    Pick the language type for a message.

    Any character outside ASCII needs more than one byte in UTF-8 and
    makes the whole message unicode.

    Args:
        message: Message text

    Returns:
        LanguageType.UNICODE if any character is non-ASCII, else LanguageType.NORMAL
    """
    for char in message:
        if ord(char) > 0x7F:
            return LanguageType.UNICODE
    return LanguageType.NORMAL


def message_to_hex(message: str) -> str:
    """
    Encode a unicode message the way the gateway expects it.

    Each character becomes its codepoint in uppercase hex, padded to at
    least four digits, with no separators ("Hi" -> "00480069").
    """
    return "".join(format(ord(char), "04X") for char in message)


def _is_language_type(value) -> bool:
    return value in (LanguageType.NORMAL.value, LanguageType.UNICODE.value)


@dataclass(frozen=True)
class ClientConfig:
    """Static gateway settings, fixed for the lifetime of a client."""

    base_url: str
    api_username: str
    api_password: str
    sender_id: str

    @classmethod
    def from_dict(cls, section: dict) -> "ClientConfig":
        """
        Build from the ``oneway`` section of config.yaml.

        Raises:
            KeyError: if a required key is missing
        """
        return cls(
            base_url=str(section['base_url']),
            api_username=str(section['api_username']),
            api_password=str(section['api_password']),
            sender_id=str(section['sender_id']),
        )

    def __repr__(self):
        return (
            f"ClientConfig(base_url={self.base_url!r}, api_username={self.api_username!r}, "
            f"api_password='***', sender_id={self.sender_id!r})"
        )


@dataclass(frozen=True)
class SendMessageInput:
    """
    Send SMS input.

    Attributes:
        message: Content of the SMS
        mobile_no: Recipient phone numbers including country code, e.g. 6581234567
        language_type: LanguageType, "1"/"2", or None/"" to detect from the message
    """

    message: str
    mobile_no: List[str] = field(default_factory=list)
    language_type: Optional[Union[LanguageType, str]] = None

    def validate(self) -> None:
        if not self.message:
            raise ValidationError("SendMessageInput", "Message")
        if not isinstance(self.message, str):
            raise ValidationError("SendMessageInput", "Message", "is invalid")
        if not self.mobile_no:
            raise ValidationError("SendMessageInput", "MobileNo")
        if not isinstance(self.mobile_no, (list, tuple)) or \
           not all(isinstance(number, str) for number in self.mobile_no):
            raise ValidationError("SendMessageInput", "MobileNo", "is invalid")
        if not self._detect_language() and not _is_language_type(self.language_type):
            raise ValidationError("SendMessageInput", "LanguageType", "is invalid")

    def _detect_language(self) -> bool:
        # "" is the unset value JSON clients send
        return self.language_type is None or self.language_type == ""

    def resolve_language_type(self) -> LanguageType:
        """Return the explicit language type, or detect one from the message."""
        if self._detect_language():
            resolved = detect_language_type(self.message)
        else:
            resolved = self.language_type
        if not _is_language_type(resolved):
            raise ValidationError("SendMessageInput", "LanguageType", "is invalid")
        return LanguageType(resolved)


@dataclass(frozen=True)
class SendMessageOutput:
    mt_ids: List[int]


@dataclass(frozen=True)
class CheckStatusInput:
    mt_id: int

    def validate(self) -> None:
        if not self.mt_id:
            raise ValidationError("CheckStatusInput", "MTID")
        # bool is an int subclass but never a valid ID
        if not isinstance(self.mt_id, int) or isinstance(self.mt_id, bool):
            raise ValidationError("CheckStatusInput", "MTID", "is invalid")


@dataclass(frozen=True)
class CheckStatusOutput:
    status: TransactionStatus


@dataclass(frozen=True)
class CheckBalanceOutput:
    credit_balance: float
