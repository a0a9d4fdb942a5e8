import base64
import hashlib
import hmac
import json

import pytest
import requests

from conftest import fake_response
from paynow_methods import PaymentMethodType, PaynowClient, ProviderError
from paynow_methods.core.client import calculate_signature

METHODS_RESPONSE = [
    {
        "id": 2007,
        "name": "BLIK",
        "description": "BLIK",
        "image": "https://static.sandbox.paynow.pl/payment-method-icons/blik.png",
        "status": "ENABLED",
        "type": "BLIK",
        "authorizationType": "CODE",
    },
    {
        "id": 2002,
        "name": "Karta płatnicza",
        "description": "Karta",
        "image": "https://static.sandbox.paynow.pl/payment-method-icons/card.png",
        "status": "ENABLED",
        "type": "CARD",
    },
    {
        "id": 1000,
        "name": "mTransfer",
        "description": "mBank",
        "image": "https://static.sandbox.paynow.pl/payment-method-icons/mbank.png",
        "status": "DISABLED",
        "type": "PBL",
    },
]


def test_get_payment_methods_parses_response(config, session):
    session.get.return_value = fake_response(200, METHODS_RESPONSE)
    client = PaynowClient(config, session=session)

    methods = client.get_payment_methods("PLN", 1234, True, "idem-key", "buyer-1")

    assert [method.id for method in methods.all()] == ["2007", "2002", "1000"]
    assert [method.id for method in methods.only_blik()] == ["2007"]
    assert [method.id for method in methods.only_cards()] == ["2002"]
    pbl = methods.all()[2]
    assert pbl.type is PaymentMethodType.OTHER
    assert pbl.provider_type == "PBL"
    assert pbl.enabled is False


def test_get_payment_methods_sends_signed_request(config, session):
    session.get.return_value = fake_response(200, [])
    client = PaynowClient(config, session=session)

    client.get_payment_methods("PLN", 1234, False, "idem-key", None)

    args, kwargs = session.get.call_args
    assert args[0] == "https://api.sandbox.paynow.pl/v3/payments/paymentmethods"
    assert kwargs["params"] == {"amount": "1234", "currency": "PLN", "applePayEnabled": "false"}
    assert kwargs["timeout"] == config.timeout_seconds
    headers = kwargs["headers"]
    assert headers["Api-Key"] == "api-key"
    assert headers["Idempotency-Key"] == "idem-key"
    assert headers["Signature"] == calculate_signature(
        "signature-key",
        {"Api-Key": "api-key", "Idempotency-Key": "idem-key"},
        kwargs["params"],
    )


def test_absent_values_are_not_sent(config, session):
    session.get.return_value = fake_response(200, [])
    PaynowClient(config, session=session).get_payment_methods()

    _, kwargs = session.get.call_args
    assert kwargs["params"] == {"applePayEnabled": "false"}
    assert "Idempotency-Key" not in kwargs["headers"]


def test_calculate_signature_matches_manual_hmac():
    expected_document = json.dumps(
        {
            "headers": {"Api-Key": "k"},
            "parameters": {"amount": "100", "currency": "PLN"},
            "body": "",
        },
        separators=(",", ":"),
    )
    expected = base64.b64encode(
        hmac.new(b"secret", expected_document.encode("utf-8"), hashlib.sha256).digest()
    ).decode("ascii")

    assert calculate_signature("secret", {"Api-Key": "k"}, {"currency": "PLN", "amount": 100}) == expected


def test_http_error_becomes_provider_error(config, session):
    session.get.return_value = fake_response(
        401,
        {"statusCode": 401, "errors": [{"errorType": "UNAUTHORIZED", "message": "Invalid API key"}]},
        text="unauthorized",
    )

    with pytest.raises(ProviderError) as excinfo:
        PaynowClient(config, session=session).get_payment_methods("PLN", 100)

    assert excinfo.value.code == 401
    assert excinfo.value.errors == [{"errorType": "UNAUTHORIZED", "message": "Invalid API key"}]
    assert "UNAUTHORIZED: Invalid API key" in excinfo.value.message


def test_http_error_without_json_body(config, session):
    session.get.return_value = fake_response(504, ValueError("no json"), text="Gateway Timeout")

    with pytest.raises(ProviderError) as excinfo:
        PaynowClient(config, session=session).get_payment_methods("PLN", 100)

    assert excinfo.value.code == 504
    assert "Gateway Timeout" in str(excinfo.value)


def test_transport_error_becomes_provider_error(config, session):
    session.get.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(ProviderError) as excinfo:
        PaynowClient(config, session=session).get_payment_methods("PLN", 100)

    assert excinfo.value.code is None


@pytest.mark.parametrize("payload", [ValueError("broken"), {"not": "a list"}, [1, 2]])
def test_unreadable_body_becomes_provider_error(config, session, payload):
    session.get.return_value = fake_response(200, payload, text="garbage")

    with pytest.raises(ProviderError) as excinfo:
        PaynowClient(config, session=session).get_payment_methods("PLN", 100)

    assert excinfo.value.code == 200


def test_null_fields_become_empty_strings(config, session):
    session.get.return_value = fake_response(
        200,
        [{"id": None, "name": None, "description": None, "image": None, "status": "ENABLED", "type": None}],
    )

    method = PaynowClient(config, session=session).get_payment_methods("PLN", 100).all()[0]

    assert method.id == ""
    assert method.name == ""
    assert method.type is PaymentMethodType.OTHER
    assert method.to_payload()["image"] == ""
