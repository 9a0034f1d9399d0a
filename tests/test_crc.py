from vietqr.crc import crc16_ccitt, crc16_hex, verify_crc
from vietqr.vietqr_encoder import generate


class TestCrc16Ccitt:
    def test_empty_input_returns_initial_register(self):
        assert crc16_ccitt(b"") == 0xFFFF

    def test_check_value(self):
        # CRC-16/CCITT-FALSE reference check value
        assert crc16_ccitt(b"123456789") == 0x29B1

    def test_single_byte(self):
        assert crc16_ccitt(b"A") == 0xB915

    def test_deterministic(self):
        data = b"00020101021153037045802VN6304"
        assert crc16_ccitt(data) == crc16_ccitt(data)

    def test_single_bit_flip_changes_result(self):
        assert crc16_ccitt(b"123456789") != crc16_ccitt(b"123456788")
        assert crc16_ccitt(b"\x00") != crc16_ccitt(b"\x01")

    def test_result_fits_sixteen_bits(self):
        assert 0 <= crc16_ccitt(bytes(range(256)) * 4) <= 0xFFFF


class TestCrc16Hex:
    def test_uppercase_four_digits(self):
        result = crc16_hex("123456789")
        assert result == "29B1"

    def test_zero_padded(self):
        result = crc16_hex("test")
        assert len(result) == 4
        assert result == result.upper()

    def test_encodes_utf8(self):
        assert crc16_hex("đ") == f"{crc16_ccitt('đ'.encode('utf-8')):04X}"


class TestVerifyCrc:
    def test_generated_payload_is_valid(self):
        assert verify_crc(generate("970422", "0113VQRQADKQM4768", amount="50000"))

    def test_lowercase_checksum_accepted(self):
        payload = generate("970422", "123456")
        assert verify_crc(payload[:-4] + payload[-4:].lower())

    def test_tampered_payload_is_invalid(self):
        payload = generate("970422", "123456", amount="50000")
        assert not verify_crc(payload.replace("50000", "90000"))

    def test_missing_crc_header(self):
        assert not verify_crc("000201")
        assert not verify_crc("")
