from datetime import datetime, timezone

from application import build_vendor_index, build_vendor_page
from domain.schemas import TaggedItem


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_vendor_index_sorted_by_count_then_name(items: list[TaggedItem]) -> None:
    index = build_vendor_index(items)

    assert [v.name for v in index] == ["Verizon", "Chainalysis", "Cisco Talos", "Microsoft", "Okta"]
    verizon = index[0]
    assert verizon.slug == "verizon"
    assert verizon.full_path == "/vendors/verizon"
    assert verizon.stats_count == 2
    assert verizon.latest_activity == utc(2024, 6, 1, 10)


def test_vendor_index_dedupes_by_slug_keeping_higher_count() -> None:
    items = [
        TaggedItem(id=1, title="a", publisher="verizon"),
        TaggedItem(id=2, title="b", publisher="Verizon"),
        TaggedItem(id=3, title="c", publisher="Verizon"),
        TaggedItem(id=4, title="d", publisher=None),
    ]
    index = build_vendor_index(items)

    assert len(index) == 1
    assert index[0].name == "Verizon" and index[0].stats_count == 2


def test_vendor_page(items: list[TaggedItem]) -> None:
    page = build_vendor_page("verizon", items)

    assert page is not None
    assert page.name == "Verizon"
    assert page.total_count == 2
    assert [it.id for it in page.items] == [1, 5]
    assert {c.name for c in page.top_categories} == {"MFA", "Identity Management", "Ransomware", "Phishing"}
    # only Chainalysis shares a tag ("Ransomware")
    assert [(v.name, v.overlap) for v in page.related_vendors] == [("Chainalysis", 1)]

    assert len(page.reports) == 1
    report = page.reports[0]
    assert report.title == "DBIR 2024"
    assert report.link == "https://example.com/dbir"
    assert report.stats_count == 2


def test_vendor_page_days_window(items: list[TaggedItem]) -> None:
    page = build_vendor_page("verizon", items, days=30, now=utc(2024, 6, 10))

    assert page is not None
    assert [it.id for it in page.items] == [5]
    assert page.total_count == 2


def test_unknown_vendor_is_none(items: list[TaggedItem]) -> None:
    assert build_vendor_page("no-such-vendor", items) is None
