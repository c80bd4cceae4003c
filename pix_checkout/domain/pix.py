"""PIX BR Code payload encoder (EMV-MPM TLV fields + CRC16/CCITT-FALSE)"""

import re
import unicodedata
from decimal import Decimal
from typing import Dict

from pix_checkout.domain.exceptions import InvalidPayloadError, MissingMerchantKey
from pix_checkout.domain.models import MerchantProfile, PaymentRequest
from pix_checkout.utils.money import quantize_brl, to_decimal

PIX_DOMAIN = "br.gov.bcb.pix"
MERCHANT_CATEGORY_CODE = "0000"  # unclassified
CURRENCY_BRL = "986"  # ISO 4217 numeric
COUNTRY_CODE = "BR"
CRC_PLACEHOLDER = "6304"

MAX_NAME_LENGTH = 25
MAX_CITY_LENGTH = 15
MAX_TXID_LENGTH = 25

DEFAULT_MERCHANT_NAME = "PAGAMENTO"
DEFAULT_MERCHANT_CITY = "BRASIL"
NO_REFERENCE_TXID = "***"

_KEY_DISALLOWED = re.compile(r"[^a-zA-Z0-9@.]")
_TEXT_DISALLOWED = re.compile(r"[^A-Z0-9]")
_TXID_DISALLOWED = re.compile(r"[^a-zA-Z0-9]")


def crc16_ccitt(data: str) -> str:
    """
    CRC16/CCITT-FALSE over the UTF-8 bytes of data.

    Polynomial 0x1021, initial value 0xFFFF, no reflection, no final XOR.
    Returned as 4 uppercase hex digits.
    """
    crc = 0xFFFF
    for byte in data.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = (crc << 1) ^ 0x1021
            else:
                crc = crc << 1
            crc &= 0xFFFF
    return f"{crc:04X}"


def format_field(tag: str, value: str) -> str:
    """Encode one TLV field: 2-digit tag, 2-digit byte length, value"""
    length = len(value.encode("utf-8"))
    if length > 99:
        raise ValueError(f"Field {tag} value too long ({length} bytes)")
    return f"{tag}{length:02d}{value}"


def sanitize_text(value: str | None, max_length: int) -> str:
    """
    Normalize a free-text field for the payload.

    Order matters: decompose, drop diacritics, uppercase, strip anything
    outside [A-Z0-9], and only then truncate.
    """
    decomposed = unicodedata.normalize("NFD", value or "")
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = _TEXT_DISALLOWED.sub("", without_marks.upper())
    return cleaned[:max_length]


def sanitize_pix_key(pix_key: str | None) -> str:
    """Best-effort charset cleanup; does not validate key structure"""
    return _KEY_DISALLOWED.sub("", (pix_key or "").strip())


def sanitize_transaction_id(transaction_id: str | None) -> str:
    cleaned = _TXID_DISALLOWED.sub("", transaction_id or "")[:MAX_TXID_LENGTH]
    return cleaned or NO_REFERENCE_TXID


def format_amount(amount: Decimal | None) -> str | None:
    """Two decimals with a dot, or None when there is no positive amount"""
    if amount is None:
        return None
    value = quantize_brl(to_decimal(amount))
    if value <= 0:
        return None
    return f"{value:.2f}"


def encode(merchant: MerchantProfile, payment: PaymentRequest, single_use: bool = False) -> str:
    """
    Build the BR Code string for a merchant and payment.

    Args:
        merchant: Recipient key, name and city
        payment: Amount and transaction id
        single_use: Emit point-of-initiation "12" (payload valid for one payment)

    Returns:
        Payload string ending in the 4-hex-digit CRC

    Raises:
        MissingMerchantKey: pix_key is empty after sanitization
    """
    key = sanitize_pix_key(merchant.pix_key)
    if not key:
        raise MissingMerchantKey("Merchant has no PIX key configured")

    name = sanitize_text(merchant.display_name, MAX_NAME_LENGTH) or DEFAULT_MERCHANT_NAME
    city = sanitize_text(merchant.city, MAX_CITY_LENGTH) or DEFAULT_MERCHANT_CITY
    txid = sanitize_transaction_id(payment.transaction_id)
    amount = format_amount(payment.amount)

    fields = [format_field("00", "01")]
    if single_use:
        fields.append(format_field("01", "12"))
    fields.append(format_field("26", format_field("00", PIX_DOMAIN) + format_field("01", key)))
    fields.append(format_field("52", MERCHANT_CATEGORY_CODE))
    fields.append(format_field("53", CURRENCY_BRL))
    if amount is not None:
        fields.append(format_field("54", amount))
    fields.append(format_field("58", COUNTRY_CODE))
    fields.append(format_field("59", name))
    fields.append(format_field("60", city))
    fields.append(format_field("62", format_field("05", txid)))

    payload = "".join(fields) + CRC_PLACEHOLDER
    return payload + crc16_ccitt(payload)


def has_valid_checksum(payload: str) -> bool:
    """Recompute the CRC over everything but the last 4 characters"""
    if len(payload) < 8 or payload[-8:-4] != CRC_PLACEHOLDER:
        return False
    return crc16_ccitt(payload[:-4]) == payload[-4:].upper()


def parse_fields(payload: str) -> Dict[str, str]:
    """
    Decode one level of TLV fields into {tag: value}, in payload order.

    Nested templates (26, 62) can be decoded by calling this again on
    their value.
    """
    fields: Dict[str, str] = {}
    position = 0
    while position < len(payload):
        header = payload[position:position + 4]
        if len(header) < 4 or not header.isdigit():
            raise InvalidPayloadError(f"Malformed field header at offset {position}")
        tag, length = header[:2], int(header[2:])
        value = payload[position + 4:position + 4 + length]
        if len(value) != length:
            raise InvalidPayloadError(f"Field {tag} truncated at offset {position}")
        fields[tag] = value
        position += 4 + length
    return fields
