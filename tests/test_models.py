import math

from cnki_crawler.models.metadata import DetailMetadata, ResultRow
from cnki_crawler.models.record import ArticleRecord


def test_detail_metadata_derives_count_and_text() -> None:
    metadata = DetailMetadata(authors=["张三", "李四", "王五"], release_date="2021-03-15")
    assert metadata.author_count == 3
    assert metadata.authors_text == "张三,李四,王五"
    assert metadata.author_count == len(metadata.authors_text.split(","))


def test_record_without_enrichment_round_trips_input() -> None:
    source = {"title": "A", "source": "S1", "note": 7}
    record = ArticleRecord.from_mapping(source)
    assert record.to_dict() == source
    assert record.to_dict() is not source


def test_enrich_adds_fields_without_touching_input() -> None:
    source = {"title": "A", "source": "S1"}
    record = ArticleRecord.from_mapping(source)
    record.enrich(DetailMetadata(authors=["张三", "李四"], release_date="2020-01-02"))

    assert record.to_dict() == {
        "title": "A",
        "source": "S1",
        "authors": "张三,李四",
        "author_count": 2,
        "release_date": "2020-01-02",
    }
    assert source == {"title": "A", "source": "S1"}


def test_searchable_needs_title_and_source() -> None:
    assert ArticleRecord.from_mapping({"title": "A", "source": "S"}).is_searchable
    assert not ArticleRecord.from_mapping({"title": "A"}).is_searchable
    assert not ArticleRecord.from_mapping({"title": "  ", "source": "S"}).is_searchable
    assert not ArticleRecord.from_mapping({"title": math.nan, "source": "S"}).is_searchable


def test_numeric_title_is_stringified() -> None:
    record = ArticleRecord.from_mapping({"title": 1984, "source": "S"})
    assert record.title == "1984"


def test_result_row_parses_counts() -> None:
    row = ResultRow(title=" 图书馆 \n 研究 ", reference_count="1,234", download_count="")
    assert row.title == "图书馆 研究"
    assert row.reference_count == 1234
    assert row.download_count is None


def test_result_row_flattens_lists_for_output() -> None:
    row = ResultRow(title="T", authors=["张三", "李四"], author_urls=["u1", "u2"], download_count=5)
    flat = row.to_row()
    assert flat["authors"] == "张三,李四"
    assert flat["author_urls"] == "u1,u2"
    assert flat["download_count"] == 5
