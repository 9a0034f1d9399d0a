import pytest

from vietqr.crc import crc16_hex
from vietqr.tlv import decode_tlv
from vietqr.vietqr_encoder import (
    FIELD_PIPELINE,
    GeneratorInput,
    encode_payload,
    generate,
    normalize_message,
    parse_number,
    remove_accent,
)

BANK_BIN = "970422"
ACCOUNT = "0113VQRQADKQM4768"


class TestRemoveAccent:
    def test_plain_text_untouched(self):
        assert remove_accent("Hello") == "Hello"

    def test_vietnamese_diacritics(self):
        assert remove_accent("Chuyển tiền") == "Chuyen tien"

    def test_d_with_stroke(self):
        assert remove_accent("đường Đông") == "duong Dong"

    def test_normalize_uppercases_after_folding(self):
        assert normalize_message("đóng học phí") == "DONG HOC PHI"


class TestParseNumber:
    @pytest.mark.parametrize("text,expected", [("50000", 50000.0), ("50.5", 50.5), ("-1", -1.0), (".5", 0.5)])
    def test_numbers(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", [None, "", "abc", " 5", "1_000", "1,000", "5 ", "٥٠٠٠٠", "５００"])
    def test_rejected(self, text):
        assert parse_number(text) is None


class TestFieldOrder:
    def test_pipeline_order(self):
        assert [tag for tag, _ in FIELD_PIPELINE] == ["00", "01", "38", "52", "53", "54", "58", "59", "62"]

    def test_payload_prefix(self):
        payload = generate(BANK_BIN, ACCOUNT, amount="50000")
        assert payload.startswith("000201" "010211" "3861" "0010A000000727" "0131" "0006970422" "0117" + ACCOUNT)
        assert "0208QRIBFTTA" "52047070" "5303704" "540550000" "5802VN" "5902NA" "6304" in payload


class TestGenerate:
    def test_amount_forces_one_time_init_method(self):
        payload = generate(BANK_BIN, ACCOUNT, amount="50000", message=None, is_one_time=False)
        tags = decode_tlv(payload)
        assert tags["54"] == "50000"
        assert tags["01"] == "11"

    def test_trailing_crc_matches_preceding_characters(self):
        payload = generate(BANK_BIN, ACCOUNT, amount="50000")
        assert payload[-8:-4] == "6304"
        assert payload[-4:] == crc16_hex(payload[:-4])

    def test_reusable_without_amount(self):
        tags = decode_tlv(generate(BANK_BIN, ACCOUNT))
        assert tags["01"] == "12"
        assert "54" not in tags

    def test_one_time_flag(self):
        assert decode_tlv(generate(BANK_BIN, ACCOUNT, is_one_time=True))["01"] == "11"

    @pytest.mark.parametrize("amount", ["", "0", "-100", "abc", "1.000,00"])
    def test_invalid_amount_omits_field(self, amount):
        tags = decode_tlv(generate(BANK_BIN, ACCOUNT, amount=amount))
        assert "54" not in tags
        assert tags["01"] == "12"

    @pytest.mark.parametrize("amount", ["٥٠٠٠٠", "５００００", "५००"])
    def test_non_ascii_digits_omit_amount(self, amount):
        payload = generate(BANK_BIN, ACCOUNT, amount=amount)
        tags = decode_tlv(payload)
        assert payload.isascii()
        assert "54" not in tags
        assert tags["01"] == "12"

    def test_fractional_amount_kept_but_not_one_time(self):
        tags = decode_tlv(generate(BANK_BIN, ACCOUNT, amount="50.5"))
        assert tags["54"] == "50.5"
        assert tags["01"] == "12"

    def test_merchant_account_info(self):
        tags = decode_tlv(generate(BANK_BIN, ACCOUNT))
        assert tags["38_00"] == "A000000727"
        assert tags["38_01_00"] == BANK_BIN
        assert tags["38_01_01"] == ACCOUNT
        assert tags["38_02"] == "QRIBFTTA"

    def test_fixed_fields(self):
        tags = decode_tlv(generate(BANK_BIN, ACCOUNT))
        assert tags["00"] == "01"
        assert tags["52"] == "7070"
        assert tags["53"] == "704"
        assert tags["58"] == "VN"
        assert tags["59"] == "NA"

    def test_identifiers_not_validated(self):
        tags = decode_tlv(generate("not-a-bin", ""))
        assert tags["38_01"] == "0009not-a-bin"
        assert "38_01_01" not in tags

    def test_message_normalized(self):
        tags = decode_tlv(generate(BANK_BIN, ACCOUNT, message="Chuyển tiền"))
        assert tags["62_02"] == "QRIBFTTA"
        assert "CHUYEN TIEN" in tags["62_08"]

    def test_d_with_stroke_in_message(self):
        tags = decode_tlv(generate(BANK_BIN, ACCOUNT, message="Đóng tiền điện"))
        assert tags["62_08"] == "DONG TIEN DIEN"
        assert "đ" not in tags["62_08"].lower()

    def test_empty_message_omits_additional_data(self):
        assert "62" not in decode_tlv(generate(BANK_BIN, ACCOUNT, message=""))

    def test_encode_payload_exposes_crc(self):
        encoded = encode_payload(GeneratorInput(bank_bin=BANK_BIN, account_number=ACCOUNT))
        assert encoded.payload.endswith("6304" + encoded.crc)
        assert len(encoded.crc) == 4

    @pytest.mark.parametrize(
        "data,expected",
        [
            (GeneratorInput(bank_bin=BANK_BIN, account_number=ACCOUNT), "12"),
            (GeneratorInput(bank_bin=BANK_BIN, account_number=ACCOUNT, amount="50000"), "11"),
            (GeneratorInput(bank_bin=BANK_BIN, account_number=ACCOUNT, is_one_time=True), "11"),
        ],
    )
    def test_encode_payload_exposes_init_method(self, data, expected):
        encoded = encode_payload(data)
        assert encoded.init_method == expected
        assert decode_tlv(encoded.payload)["01"] == expected

    def test_deterministic(self):
        assert generate(BANK_BIN, ACCOUNT, "1000", "abc") == generate(BANK_BIN, ACCOUNT, "1000", "abc")
