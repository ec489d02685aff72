import pytest

from sms_errors import ErrorCode, GatewayError, SMSError, ValidationError


def test_gateway_error_string_includes_status_and_reason():
    err = GatewayError.from_code(ErrorCode.REQUEST_FAILURE, 500)
    assert str(err) == "OneWaySMS: Error 500 (Internal Server Error): request failure"


def test_gateway_error_fields():
    err = GatewayError.from_code(ErrorCode.INVALID_CREDENTIALS, 200)
    assert err.code is ErrorCode.INVALID_CREDENTIALS
    assert err.code == "InvalidCredentials"
    assert err.message == "apiusername or apipassword is invalid"
    assert err.status_code == 200
    assert str(err) == "OneWaySMS: Error 200 (OK): apiusername or apipassword is invalid"


def test_gateway_error_accepts_plain_code_string():
    err = GatewayError("MTInvalidNotFound", "custom", 404)
    assert err.code is ErrorCode.MT_INVALID_NOT_FOUND
    assert err.message == "custom"


def test_every_code_has_a_message():
    for code in ErrorCode:
        assert GatewayError.from_code(code, 200).message


def test_validation_error_names_field():
    err = ValidationError("SendMessageInput", "Message")
    assert err.field == "Message"
    assert str(err) == "SendMessageInput: Error: Message is required"
    assert isinstance(err, ValueError)


def test_both_families_share_base():
    with pytest.raises(SMSError):
        raise GatewayError.from_code(ErrorCode.UNKNOWN_ERROR, 200)
    with pytest.raises(SMSError):
        raise ValidationError("CheckStatusInput", "MTID")
