import pytest

from cnki_crawler.utils.text_utils import clean_author_name, normalize_text, parse_count, parse_page_mark


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("张三1", "张三"),
        ("张三1,2", "张三"),
        ("李四 2，3", "李四"),
        ("王五", "王五"),
        ("Smith John3", "Smith John"),
        ("  赵六12 ", "赵六"),
        ("", ""),
    ],
)
def test_clean_author_name(raw: str, expected: str) -> None:
    assert clean_author_name(raw) == expected


@pytest.mark.parametrize("raw", ["张三1,2", "A1B2", "Li 3rd 4", " ,5;", "孙七"])
def test_clean_author_name_is_idempotent(raw: str) -> None:
    once = clean_author_name(raw)
    assert clean_author_name(once) == once


@pytest.mark.parametrize("text, expected", [("3/120", 120), ("1/1", 1), (" 2 / 15 ", 15)])
def test_parse_page_mark(text: str, expected: int) -> None:
    assert parse_page_mark(text) == expected


@pytest.mark.parametrize("text", ["", "120", "1/", "a/b", "1/2/3"])
def test_parse_page_mark_rejects_malformed(text: str) -> None:
    with pytest.raises(ValueError):
        parse_page_mark(text)


@pytest.mark.parametrize(
    "text, expected",
    [("1,234", 1234), ("共找到 56 条结果", 56), ("", None), (None, None), ("无", None)],
)
def test_parse_count(text, expected) -> None:
    assert parse_count(text) == expected


def test_normalize_text_collapses_whitespace() -> None:
    assert normalize_text("  2021-03-15\n ") == "2021-03-15"
    assert normalize_text(None) == ""
