from domain.catalog import aggregate, count_publishers, count_tags, related_tag_counts, subcategory_counts
from domain.schemas import TaggedItem
from domain.taxonomy import TaxonomyResolver


def test_synonym_spellings_all_aggregate_under_child(resolver: TaxonomyResolver, items: list[TaggedItem]) -> None:
    resolved = resolver.resolve_by_slug_path(["2fa"])
    assert resolved is not None

    matched = aggregate(items, resolved.matching_slugs)

    # "MFA", "2FA" and "Multi Factor Authentication", original order kept
    assert [it.id for it in matched] == [1, 2, 3]


def test_parent_aggregates_only_its_own_slug(resolver: TaxonomyResolver, items: list[TaggedItem]) -> None:
    resolved = resolver.resolve_by_slug_path(["identity-access"])
    assert resolved is not None
    assert aggregate(items, resolved.matching_slugs) == []


def test_aggregate_with_no_matches_is_empty(items: list[TaggedItem]) -> None:
    assert aggregate(items, ("does-not-exist",)) == []
    assert aggregate([], ("mfa",)) == []


def test_subcategory_counts_skip_empty_children(resolver: TaxonomyResolver, items: list[TaggedItem]) -> None:
    identity = resolver.taxonomy.categories[0]
    links = subcategory_counts(identity, items)

    assert [(l.slug, l.count, l.full_path) for l in links] == [
        ("mfa", 3, "/categories/identity-access/mfa"),
        ("identity-management", 1, "/categories/identity-access/identity-management"),
    ]


def test_item_with_several_synonyms_counts_once() -> None:
    item = TaggedItem(id=1, title="x", tags=["MFA", "2FA", "Multi-Factor Authentication"])
    assert len(aggregate([item], ("mfa", "multi-factor-authentication", "2fa"))) == 1


def test_count_publishers(items: list[TaggedItem]) -> None:
    counts = count_publishers(items)
    assert counts[0].name == "Verizon" and counts[0].count == 2
    assert len(count_publishers(items, 2)) == 2


def test_count_tags_keeps_exact_spelling(items: list[TaggedItem]) -> None:
    counts = {c.name: c.count for c in count_tags(items)}
    assert counts["Ransomware"] == 2
    assert counts["2FA"] == 1


def test_related_tags_exclude_the_category_itself(items: list[TaggedItem]) -> None:
    related = related_tag_counts(items, ("ransomware",), "Ransomware")
    names = [r.name for r in related]

    assert "Ransomware" not in names
    assert set(names) == {"Cryptocurrency", "Phishing"}


def test_related_tags_skip_empty_slugs() -> None:
    item = TaggedItem(id=1, title="x", tags=["Ransomware", "!!!"])
    assert related_tag_counts([item], ("ransomware",), "Ransomware") == []
