import pytest

from reader_translation.language import classify, contains_latin, is_cjk_char


@pytest.mark.parametrize(
    "text,expected",
    [
        ("안녕하세요", "ko"),
        ("こんにちは", "ja"),
        ("カタカナ", "ja"),
        ("你好世界", "zh"),
        ("漢字とかな", "ja"),
        ("안녕 漢字", "ko"),
    ],
)
def test_cjk_scripts(text, expected):
    assert classify(text) == expected


def test_cjk_requires_ratio_above_threshold():
    # 3 CJK chars / 10 = 0.30 exactly, not above
    assert classify("abcdefg你好漢") == "en"
    assert classify("OK你好") == "zh"


def test_mixed_latin_with_few_cjk_chars_is_english():
    assert classify("Hello there 你") == "en"


def test_empty_and_whitespace_default_to_english():
    assert classify("") == "en"
    assert classify("   \n\t ") == "en"
    assert classify(None) == "en"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("¿Qué pasa?", "es"),
        ("mañana", "es"),
        ("ça va", "es"),
        ("cœur", "fr"),
        ("Straße", "de"),
        ("Hello world", "en"),
        ("1234 !!", "en"),
    ],
)
def test_diacritic_signatures_in_priority_order(text, expected):
    assert classify(text) == expected


def test_diacritics_are_found_on_any_line():
    assert classify("Hello\nwhat\nqué") == "es"


def test_diacritics_are_case_insensitive():
    assert classify("ÉCOLE") == "es"


def test_contains_latin():
    assert contains_latin("abc") is True
    assert contains_latin("안녕 1") is False
    assert contains_latin("") is False


def test_is_cjk_char():
    assert is_cjk_char("你")
    assert is_cjk_char("ひ")
    assert is_cjk_char("カ")
    assert is_cjk_char("한")
    assert is_cjk_char("ㄱ")
    assert not is_cjk_char("a")
    assert not is_cjk_char("!")
