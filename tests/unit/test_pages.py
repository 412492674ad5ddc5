from application import (
    CategoryIndex,
    CategoryPage,
    NotFound,
    PageKind,
    build_category_index,
    build_category_page,
    route_category_request,
    serve_category_request,
)
from application.pages import merge_items, meta_description, tag_queries
from domain.catalog import item_matches
from domain.schemas import TaggedItem
from domain.site import Site
from domain.taxonomy import RedirectDecider, RedirectTarget, normalize
from infrastructure.config.models import SiteConfig
from infrastructure.sources import StatsSource


class _FakeSource(StatsSource):
    def __init__(self, items: list[TaggedItem]) -> None:
        super().__init__(cfg=SiteConfig())
        self.items = items
        self.tags: list[str | None] = []

    def fetch_items(self, *, limit: int, tag: str | None = None, days: int | None = None) -> list[TaggedItem]:
        self.tags.append(tag)
        found = self.items if tag is None else [it for it in self.items if item_matches(it, {normalize(tag)})]
        return found[:limit]


def test_child_page_aggregates_synonyms(site: Site, items: list[TaggedItem]) -> None:
    page = build_category_page(site, ["identity-access", "mfa"], items)

    assert page is not None
    assert page.kind is PageKind.CHILD
    assert page.name == "Multi-Factor Authentication"
    assert page.full_path == "/categories/identity-access/mfa"
    assert [it.id for it in page.items] == [1, 2, 3]
    assert page.parent is not None and page.parent.full_path == "/categories/identity-access"
    assert page.title == "Multi-Factor Authentication in Identity & Access | Cyberstats"
    assert page.subcategories == []
    assert not page.is_parent


def test_child_page_description_names_parent_and_vendors(site: Site, items: list[TaggedItem]) -> None:
    page = build_category_page(site, ["identity-access", "mfa"], items)
    assert page is not None
    assert page.description.startswith("Explore 3 cybersecurity statistics about multi-factor authentication in")
    assert "Verizon" in page.description
    assert len(page.meta_description) <= 160


def test_parent_page_lists_subcategories_with_items(site: Site, items: list[TaggedItem]) -> None:
    # Parent pages aggregate on the parent slug; one item tagged with it is enough.
    items = items + [TaggedItem(id=7, title="Threat landscape", tags=["Threats"], publisher="ENISA")]
    page = build_category_page(site, ["threats"], items)

    assert page is not None
    assert page.is_parent
    assert page.title == "Threats Statistics | Cyberstats"
    assert [(s.slug, s.count) for s in page.subcategories] == [("ransomware", 2), ("phishing", 1)]


def test_override_description_is_used(site: Site, items: list[TaggedItem]) -> None:
    page = build_category_page(site, ["threats", "ransomware"], items)
    assert page is not None
    assert page.description == "Editor-written ransomware description."
    assert page.meta_description.endswith("Updated regularly with latest research.")


def test_related_categories_link_to_canonical_paths(site: Site, items: list[TaggedItem]) -> None:
    page = build_category_page(site, ["threats", "ransomware"], items)
    assert page is not None

    links = {link.slug: link.full_path for link in page.related_categories}
    assert links["phishing"] == "/categories/threats/phishing"
    assert links["cryptocurrency"] == "/categories/cryptocurrency"
    assert [v.name for v in page.top_vendors] == ["Chainalysis", "Verizon"]


def test_flat_tag_page_uses_spelling_from_data(site: Site, items: list[TaggedItem]) -> None:
    page = build_category_page(site, ["cve"], items)

    assert page is not None
    assert page.kind is PageKind.TAG
    assert page.name == "CVE"
    assert page.full_path == "/categories/cve"
    assert page.parent is None


def test_unknown_or_empty_pages_are_none(site: Site, items: list[TaggedItem]) -> None:
    assert build_category_page(site, ["identity-access", "2fa"], items) is None
    assert build_category_page(site, ["vulnerabilities", "zero-day"], items) is None
    assert build_category_page(site, ["no-such-tag"], items) is None
    assert build_category_page(site, [], items) is None


def test_meta_description_pads_and_caps() -> None:
    assert meta_description("Short.") == "Short. Updated regularly with latest research."
    assert len(meta_description("x" * 500)) == 160


def test_category_index_merges_spellings_and_applies_min_count(site: Site) -> None:
    items = [
        TaggedItem(id=1, title="a", tags=["MFA", "Cloud"]),
        TaggedItem(id=2, title="b", tags=["mfa"]),
        TaggedItem(id=3, title="c", tags=["MFA", "mfa"]),
        TaggedItem(id=4, title="d", tags=["Cloud", "Zero Trust"]),
        TaggedItem(id=5, title="e", tags=["Cloud"]),
    ]
    index = build_category_index(items, min_count=3, resolver=site.resolver)

    assert [(e.name, e.count, e.full_path) for e in index.entries] == [
        ("Cloud", 3, "/categories/cloud"),
        ("MFA", 3, "/categories/identity-access/mfa"),
    ]


def test_route_redirects_before_rendering(site: Site, items: list[TaggedItem]) -> None:
    result = route_category_request(site, "/categories/2fa", items)
    assert isinstance(result, RedirectTarget)
    assert result.location == "/categories/identity-access/mfa"

    legacy = route_category_request(site, "/categories/vulnerabilities/cve", items)
    assert isinstance(legacy, RedirectTarget) and legacy.location == "/categories/cve"


def test_route_renders_pages_index_and_not_found(site: Site, items: list[TaggedItem]) -> None:
    assert isinstance(route_category_request(site, "/categories/identity-access/mfa", items), CategoryPage)
    assert isinstance(route_category_request(site, "/categories", items, min_count=1), CategoryIndex)
    assert isinstance(route_category_request(site, "/categories/", items, min_count=1), CategoryIndex)

    missing = route_category_request(site, "/categories/not-a-real-slug", items)
    assert isinstance(missing, NotFound)
    assert missing.status_code == 404


def test_serve_skips_fetch_for_redirects(site: Site, items: list[TaggedItem]) -> None:
    source = _FakeSource(items)

    result = serve_category_request(site, source, "/categories/2fa", limit=100)
    assert isinstance(result, RedirectTarget)
    assert source.tags == []

    page = serve_category_request(site, source, "/categories/identity-access/mfa", limit=100)
    assert isinstance(page, CategoryPage)
    assert [it.id for it in page.items] == [1, 2, 3]
    assert source.tags == ["Multi-Factor Authentication", "mfa", "2fa", None]


def test_serve_finds_items_older_than_the_broader_window(site: Site) -> None:
    recent = [TaggedItem(id=100 + i, title=f"cloud {i}", tags=["Cloud"]) for i in range(5)]
    old = TaggedItem(id=1, title="Old ransomware stat", tags=["Ransomware", "Cloud"], created_at="2019-01-01T00:00:00Z")
    source = _FakeSource(recent + [old])

    page = serve_category_request(site, source, "/categories/threats/ransomware", limit=5)

    assert isinstance(page, CategoryPage)
    assert [it.id for it in page.items] == [1]
    # Related categories come from the unfiltered window, which does not hold the old item.
    assert page.related_categories == []


def test_serve_parent_and_flat_tag_queries(site: Site, items: list[TaggedItem]) -> None:
    items = items + [TaggedItem(id=7, title="Threat landscape", tags=["Threats"], publisher="ENISA")]
    source = _FakeSource(items)

    parent = serve_category_request(site, source, "/categories/threats", limit=100)
    assert isinstance(parent, CategoryPage) and parent.is_parent
    assert [s.slug for s in parent.subcategories] == ["ransomware", "phishing"]
    assert source.tags == ["Threats", None]

    source.tags.clear()
    flat = serve_category_request(site, source, "/categories/cve", limit=100)
    assert isinstance(flat, CategoryPage) and flat.name == "CVE"
    assert source.tags == ["cve", None]


def test_serve_unknown_subcategory_skips_fetch(site: Site, items: list[TaggedItem]) -> None:
    source = _FakeSource(items)
    result = serve_category_request(site, source, "/categories/threats/not-a-child", limit=100)
    assert isinstance(result, NotFound)
    assert source.tags == []


def test_serve_index_uses_one_unfiltered_fetch(site: Site, items: list[TaggedItem]) -> None:
    source = _FakeSource(items)
    index = serve_category_request(site, source, "/categories?page=2", limit=100, min_count=1)
    assert isinstance(index, CategoryIndex)
    assert source.tags == [None]


def test_serve_decides_redirect_once(monkeypatch, site: Site, items: list[TaggedItem]) -> None:
    calls: list[str] = []
    decide = RedirectDecider.decide_redirect

    def counting(self: RedirectDecider, request_path: str) -> RedirectTarget | None:
        calls.append(request_path)
        return decide(self, request_path)

    monkeypatch.setattr(RedirectDecider, "decide_redirect", counting)
    serve_category_request(site, _FakeSource(items), "/categories/identity-access/mfa", limit=100)
    assert calls == ["/categories/identity-access/mfa"]


def test_route_ignores_fragment_on_index(site: Site, items: list[TaggedItem]) -> None:
    assert isinstance(route_category_request(site, "/categories#top", items, min_count=1), CategoryIndex)
    assert isinstance(route_category_request(site, "/categories/#top", items, min_count=1), CategoryIndex)


def test_tag_queries(site: Site) -> None:
    assert tag_queries(site.resolver, ["identity-access", "mfa"]) == ["Multi-Factor Authentication", "mfa", "2fa"]
    assert tag_queries(site.resolver, ["identity-access"]) == ["Identity & Access"]
    assert tag_queries(site.resolver, ["cve"]) == ["cve"]
    assert tag_queries(site.resolver, ["threats", "nope"]) == []
    assert tag_queries(site.resolver, ["a", "b", "c"]) == []


def test_merge_items_dedupes_by_id_newest_first() -> None:
    a = TaggedItem(id=1, title="a", created_at="2024-01-01T00:00:00Z")
    b = TaggedItem(id=2, title="b", created_at="2024-06-01T00:00:00Z")
    c = TaggedItem(id=3, title="c")

    merged = merge_items([[a, c], [b, a]])

    assert [it.id for it in merged] == [2, 1, 3]
