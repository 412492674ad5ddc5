import pytest

from domain.schemas import TaggedItem
from domain.site import Site
from domain.taxonomy import TaxonomyResolver, parse_taxonomy_config

TAXONOMY_DATA = {
    "categories": [
        {
            "name": "Identity & Access",
            "slug": "identity-access",
            "subcategories": [
                {
                    "name": "Multi-Factor Authentication",
                    "slug": "mfa",
                    "synonyms": ["multi-factor-authentication", "2fa"],
                },
                {"name": "Identity Management", "slug": "identity-management", "synonyms": ["iam"]},
            ],
        },
        {
            "name": "Threats",
            "slug": "threats",
            "subcategories": [
                {"name": "Ransomware", "slug": "ransomware", "synonyms": []},
                {"name": "Phishing", "slug": "phishing", "synonyms": ["social-engineering"]},
            ],
        },
        {
            "name": "Vulnerabilities",
            "slug": "vulnerabilities",
            "subcategories": [
                {"name": "Zero-Day Vulnerabilities", "slug": "zero-day", "synonyms": ["zero-day-vulnerabilities"]},
            ],
        },
    ]
}

LEGACY_REDIRECTS = {
    "vulnerabilities/cve": "cve",
    "identity-access/multi-factor-authentication": "identity-access/mfa",
    "threats/supply-chain-attacks": "supply-chain",
}


@pytest.fixture
def taxonomy_data() -> dict:
    return TAXONOMY_DATA


@pytest.fixture
def resolver() -> TaxonomyResolver:
    return TaxonomyResolver(parse_taxonomy_config(TAXONOMY_DATA))


@pytest.fixture
def site(resolver: TaxonomyResolver) -> Site:
    return Site.build(
        resolver,
        LEGACY_REDIRECTS,
        site_url="https://cyberstats.test/",
        category_overrides={"threats/ransomware": "Editor-written ransomware description."},
    )


@pytest.fixture
def items() -> list[TaggedItem]:
    rows = [
        {
            "id": 1,
            "title": "61% of breaches involved credentials without MFA",
            "tags": ["MFA", "Identity Management"],
            "publisher": "Verizon",
            "created_at": "2024-05-01T10:00:00Z",
            "link": "https://example.com/dbir",
            "source_name": "DBIR_2024.html",
        },
        {
            "id": 2,
            "title": "2FA blocks 99.9% of automated attacks",
            "tags": ["2FA"],
            "publisher": "Microsoft",
            "created_at": "2024-04-01T10:00:00Z",
            "link": "https://example.com/msft",
            "source_name": "Digital_Defense_Report.html",
        },
        {
            "id": 3,
            "title": "Multi factor authentication adoption reached 64%",
            "tags": ["Multi Factor Authentication", "Zero Trust"],
            "publisher": "Okta",
            "created_at": "2024-03-01T10:00:00Z",
        },
        {
            "id": 4,
            "title": "Ransomware payments topped $1B",
            "tags": ["Ransomware", "Cryptocurrency"],
            "publisher": "Chainalysis",
            "created_at": "2024-02-01T10:00:00Z",
        },
        {
            "id": 5,
            "title": "Ransomware attacks rose 95% year over year",
            "tags": ["Ransomware", "Phishing"],
            "publisher": "Verizon",
            "created_at": "2024-06-01T10:00:00Z",
            "link": "https://example.com/dbir",
            "source_name": "DBIR_2024.html",
        },
        {
            "id": 6,
            "title": "29,000 CVEs were published in 2023",
            "tags": ["CVE"],
            "publisher": "Cisco Talos",
            "created_at": "2024-01-15T10:00:00Z",
        },
    ]
    return [TaggedItem.model_validate(r) for r in rows]
