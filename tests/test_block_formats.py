from __future__ import annotations
import numpy as np
import pytest

from u16ans import (
    ANS_FMT, RAW_FMT, RLE_FMT,
    CodecError, ErrorCode,
    block_format, compress_bound, compress_u16, decode_block, encode_block,
)
from u16fuzz.fingerprint import fingerprint
from u16fuzz.generator import generate_u16


def test_scenario_b_constant_slice_is_degenerate_but_decodes():
    """100 fois la même valeur : taille compressée <= 1, exemptée des 3 checks
    mais vérifiée séparément via la couche bloc."""
    src = np.full(100, 241, dtype=np.uint16)
    dst = np.zeros(compress_bound(100), dtype=np.uint8)
    assert compress_u16(dst, src) <= 1

    blob = encode_block(src)
    assert block_format(blob) == RLE_FMT
    back = decode_block(blob)
    assert back.dtype == np.uint16
    assert fingerprint(back) == fingerprint(src)


def test_raw_block_for_incompressible():
    src = np.array([5, 6, 7, 8], dtype=np.uint16)
    blob = encode_block(src)
    assert block_format(blob) == RAW_FMT
    assert np.array_equal(decode_block(blob), src)


def test_empty_block():
    blob = encode_block(np.zeros(0, dtype=np.uint16))
    assert block_format(blob) == RAW_FMT
    assert decode_block(blob).size == 0


def test_ans_block_roundtrip():
    src = np.array(generate_u16(3000, 0.08, 99))
    blob = encode_block(src)
    assert block_format(blob) == ANS_FMT
    assert len(blob) < 2 * len(src)
    assert np.array_equal(decode_block(blob), src)


def test_block_symbol_above_alphabet():
    with pytest.raises(CodecError) as ei:
        encode_block(np.array([300], dtype=np.uint16))
    assert ei.value.code == ErrorCode.MAX_SYMBOL_VALUE_TOO_SMALL


@pytest.mark.parametrize("blob,code", [
    (b"", ErrorCode.SRC_SIZE_WRONG),
    (b"\x09\x01\x00\x00\x00", ErrorCode.CORRUPTION_DETECTED),
    (b"\x00\x02\x00\x00\x00\x01\x00", ErrorCode.SRC_SIZE_WRONG),
    (b"\x01\x05\x00\x00\x00", ErrorCode.SRC_SIZE_WRONG),
])
def test_malformed_blocks(blob, code):
    with pytest.raises(CodecError) as ei:
        decode_block(blob)
    assert ei.value.code == code


def test_ans_block_with_wrong_count():
    src = np.array(generate_u16(3000, 0.08, 5))
    blob = bytearray(encode_block(src))
    blob[1:5] = (4000).to_bytes(4, "little")  # nsym annoncé > réel
    with pytest.raises(CodecError) as ei:
        decode_block(bytes(blob))
    assert ei.value.code == ErrorCode.CORRUPTION_DETECTED
