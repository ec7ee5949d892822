from decimal import Decimal

from upn_decode import parse_upn_payload, verify_checksum
from upn_qr import encode_record


def test_parse_encoded_record(new_record):
    r = parse_upn_payload(encode_record(new_record))
    assert r is not None
    assert r.payer_iban == "SI56040010019981506"
    assert r.payer_name == "Janez Novak"
    assert r.amount == Decimal("1268.74")
    assert r.is_urgent is True
    assert r.is_deposit is False
    assert r.code == "CPYR"
    assert r.purpose == "Plačilo računa 18/2024"
    assert r.payment_deadline == "25.07.2024"
    assert r.receiver_reference == "SI99"
    assert r.receiver_post == "2000 Maribor"


def test_parsed_record_encodes_back_identically(legacy_record):
    payload = encode_record(legacy_record)
    assert encode_record(parse_upn_payload(payload)) == payload


def test_verify_checksum(new_record):
    payload = encode_record(new_record)
    assert verify_checksum(payload)
    assert not verify_checksum(payload.replace("Janez", "Janezz", 1))
    assert not verify_checksum(payload[:-4])
    assert not verify_checksum("")


def test_parse_without_checksum(new_record):
    payload = encode_record(new_record)
    assert parse_upn_payload(payload[:-4]).payer_name == "Janez Novak"


def test_parse_rejects_other_content(new_record):
    assert parse_upn_payload("") is None
    assert parse_upn_payload("BCD\n002\n1\nSCT\n") is None
    assert parse_upn_payload(encode_record(new_record).replace("UPNQR", "UPNXX")) is None
    bad_amount = encode_record(new_record).replace("00000126874", "12,68      ")
    assert parse_upn_payload(bad_amount) is None
