import logging

import pytest

from domain.errors import RedirectConfigError
from domain.site import Site
from domain.taxonomy import (
    PERMANENT_REDIRECT,
    RedirectDecider,
    RedirectSource,
    TaxonomyResolver,
    parse_taxonomy_config,
    split_category_path,
)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/categories/mfa", ("mfa",)),
        ("/categories/identity-access/mfa/", ("identity-access", "mfa")),
        ("/categories/mfa?utm_source=x", ("mfa",)),
        ("/categories/mfa#top", ("mfa",)),
        ("/categories", None),
        ("/categories/", None),
        ("/vendors/verizon", None),
        ("/categoriesx/mfa", None),
    ],
)
def test_split_category_path(path: str, expected: tuple[str, ...] | None) -> None:
    assert split_category_path(path) == expected


def test_synonym_redirects_to_canonical_child(site: Site) -> None:
    target = site.redirects.decide_redirect("/categories/2fa")

    assert target is not None
    assert target.location == "/categories/identity-access/mfa"
    assert target.source is RedirectSource.TAXONOMY
    assert target.status_code == PERMANENT_REDIRECT == 301


def test_single_segment_child_slug_redirects(site: Site) -> None:
    target = site.redirects.decide_redirect("/categories/mfa/")
    assert target is not None and target.location == "/categories/identity-access/mfa"


@pytest.mark.parametrize(
    "path",
    [
        "/categories/identity-access/mfa",
        "/categories/identity-access",
        "/categories",
        "/categories/",
        "/categories/not-a-real-slug",
        "/categories/identity-access/2fa",
        "/vendors/2fa",
        "/",
    ],
)
def test_no_redirect(site: Site, path: str) -> None:
    assert site.redirects.decide_redirect(path) is None


def test_legacy_map_redirects_verbatim(site: Site) -> None:
    target = site.redirects.decide_redirect("/categories/vulnerabilities/cve")
    assert target is not None
    assert target.location == "/categories/cve"
    assert target.source is RedirectSource.LEGACY
    assert target.status_code == 301


def test_legacy_cve_redirect_does_not_depend_on_taxonomy() -> None:
    # cve is a subcategory here; the legacy entry still wins for the two-segment path
    resolver = TaxonomyResolver(
        parse_taxonomy_config(
            {
                "categories": [
                    {
                        "name": "Vulnerabilities",
                        "slug": "vulnerabilities",
                        "subcategories": [{"name": "CVE", "slug": "cve"}],
                    }
                ]
            }
        )
    )
    decider = RedirectDecider(resolver, {"vulnerabilities/cve": "cve"})
    target = decider.decide_redirect("/categories/vulnerabilities/cve")
    assert target is not None and target.location == "/categories/cve"


def test_legacy_map_beats_taxonomy(resolver: TaxonomyResolver) -> None:
    decider = RedirectDecider(resolver, {"2fa": "two-factor-stats"})
    target = decider.decide_redirect("/categories/2fa")
    assert target is not None
    assert target.location == "/categories/two-factor-stats"
    assert target.source is RedirectSource.LEGACY


def test_redirect_targets_never_redirect_again(site: Site) -> None:
    paths = [f"/categories/{slug}" for slug in sorted(site.resolver.known_slugs())]
    paths += [f"/categories/{src}" for src in site.redirects.legacy_redirects]
    for path in paths:
        target = site.redirects.decide_redirect(path)
        if target is not None:
            assert site.redirects.decide_redirect(target.location) is None, path


def test_chained_legacy_target_is_rejected(resolver: TaxonomyResolver) -> None:
    # "mfa" is itself redirected to identity-access/mfa
    with pytest.raises(RedirectConfigError) as exc:
        Site.build(resolver, {"identity-access/multi-factor-authentication": "mfa"})
    assert exc.value.chains == [
        ("identity-access/multi-factor-authentication", "mfa", "/categories/identity-access/mfa")
    ]


def test_find_chains_empty_for_canonical_targets(site: Site) -> None:
    assert site.redirects.find_chains() == []


def test_legacy_map_is_read_only(site: Site) -> None:
    with pytest.raises(TypeError):
        site.redirects.legacy_redirects["xdr"] = "edr"  # type: ignore[index]


def test_redirect_decisions_log_at_debug(site: Site, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="domain.taxonomy.redirects"):
        site.redirects.decide_redirect("/categories/vulnerabilities/cve")
        site.redirects.decide_redirect("/categories/2fa")

    messages = [r.getMessage() for r in caplog.records if r.name == "domain.taxonomy.redirects"]
    assert any(m.startswith("Legacy redirect") for m in messages)
    assert any(m.startswith("Taxonomy redirect") for m in messages)
