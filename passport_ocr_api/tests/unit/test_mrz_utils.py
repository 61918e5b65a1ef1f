import pytest

from app.utils.mrz_utils import (
    LINE2_PREFIX_CORRECTIONS,
    apply_prefix_correction,
    apply_substring_corrections,
    clean_mrz_line,
    decode_mrz_date,
    line1_marker_corrections,
    normalize_name_filler,
    repair_passport_number,
    resolve_mrz_year,
    split_mrz_name,
    strip_leading_punctuation,
)


def test_decode_mrz_date_birth_and_expiry():
    assert decode_mrz_date("990101") == "01 JAN 1999"
    assert decode_mrz_date("990101", is_expiry=True) == "01 JAN 2099"
    assert decode_mrz_date("850515") == "15 MAY 1985"
    assert decode_mrz_date("310514", is_expiry=True) == "14 MAY 2031"


@pytest.mark.parametrize("raw", ["134512", "991301", "990100", "990132", "99O101", "12345", "", "1234567"])
def test_decode_mrz_date_rejects_implausible_input(raw):
    assert decode_mrz_date(raw) == ""
    assert decode_mrz_date(raw, is_expiry=True) == ""


def test_decode_mrz_date_rejects_non_ascii_digits():
    assert decode_mrz_date("٩٩٠١٠١") == ""


def test_birth_century_cutoff():
    assert resolve_mrz_year(0, is_expiry=False) == 2000
    assert resolve_mrz_year(30, is_expiry=False) == 2030
    assert resolve_mrz_year(31, is_expiry=False) == 1931
    assert resolve_mrz_year(99, is_expiry=False) == 1999
    assert resolve_mrz_year(99, is_expiry=True) == 2099
    assert resolve_mrz_year(31, is_expiry=True) == 2031


def test_clean_mrz_line_strips_whitespace_and_uppercases():
    assert clean_mrz_line(" p<chn zhang << san \t") == "P<CHNZHANG<<SAN"
    assert clean_mrz_line("") == ""


def test_line1_marker_corrections():
    table = line1_marker_corrections("CHN")
    assert apply_substring_corrections("P0CHNZHANG<<SAN", table) == "P<CHNZHANG<<SAN"
    assert apply_substring_corrections("POCHNZHANG<<SAN", table) == "P<CHNZHANG<<SAN"
    assert apply_substring_corrections("P<CHNZHANG<<SAN", table) == "P<CHNZHANG<<SAN"


def test_prefix_correction_prefers_more_specific_key():
    assert apply_prefix_correction("巳,F1234567", LINE2_PREFIX_CORRECTIONS) == "EF1234567"
    assert apply_prefix_correction("巳F1234567", LINE2_PREFIX_CORRECTIONS) == "EF1234567"
    assert apply_prefix_correction("目G1234567", LINE2_PREFIX_CORRECTIONS) == "EG1234567"
    assert apply_prefix_correction("，F1234567", LINE2_PREFIX_CORRECTIONS) == "EF1234567"


def test_prefix_correction_only_touches_the_start():
    assert apply_prefix_correction("E1234,F567", LINE2_PREFIX_CORRECTIONS) == "E1234,F567"


def test_strip_leading_punctuation():
    assert strip_leading_punctuation(".-E123") == "E123"
    assert strip_leading_punctuation("E123.") == "E123."


def test_normalize_name_filler_replaces_k_runs():
    assert normalize_name_filler("ZHANGKKSANKKKK") == "ZHANG<<SAN<<<<"
    assert normalize_name_filler("LIK<WEI<<<") == "LI<<WEI<<<"


def test_normalize_name_filler_keeps_single_k_inside_names():
    assert normalize_name_filler("KONG<<KAI<<<") == "KONG<<KAI<<<"


def test_split_mrz_name():
    assert split_mrz_name("DOE<<JOHN<<<<<<") == ("DOE", "JOHN")
    assert split_mrz_name("DOE<<JOHN<PAUL<<<<") == ("DOE", "JOHN PAUL")
    assert split_mrz_name("ZHANG1<<SAN2<<<") == ("ZHANG", "SAN")
    assert split_mrz_name("ZHANG<SAN") == ("", "")


def test_repair_passport_number():
    # duplicated trailing digit is dropped
    assert repair_passport_number("E123456788") == "E12345678"
    assert repair_passport_number("EA123456788") == "EA12345678"
    # otherwise anything past nine characters is cut
    assert repair_passport_number("E123456783") == "E12345678"
    assert repair_passport_number("E12-345 678") == "E12345678"
    assert repair_passport_number("e1234567") == "E1234567"


def test_century_rule_for_every_two_digit_year():
    for yy in range(100):
        raw = f"{yy:02d}0615"
        birth_year = 2000 + yy if yy <= 30 else 1900 + yy
        assert decode_mrz_date(raw) == f"15 JUN {birth_year}"
        assert decode_mrz_date(raw, is_expiry=True) == f"15 JUN {2000 + yy}"


def test_single_k_between_given_names_is_kept():
    # 'SAN<FENG' misread as 'SANKFENG' stays joined, same as pinyin KONG
    segment = normalize_name_filler("ZHANG<<SANKFENG<<<<")
    assert segment == "ZHANG<<SANKFENG<<<<"
    assert split_mrz_name(segment) == ("ZHANG", "SANKFENG")
    # a trailing K run is still read as filler
    assert normalize_name_filler("ZHANG<<SANFENGKKK") == "ZHANG<<SANFENG<<<"
