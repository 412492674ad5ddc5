from pathlib import Path

# Repo-root conventional directories/files (overrideable via site.yaml)
CONFIG_DIR = Path("configs")
SITE_FILE = CONFIG_DIR / "site.yaml"
TAXONOMY_FILE = CONFIG_DIR / "taxonomy.yaml"
REDIRECTS_FILE = CONFIG_DIR / "legacy_redirects.yaml"
OVERRIDES_FILE = CONFIG_DIR / "category_overrides.yaml"

DEFAULT_SITE_URL = "https://cyberstats.io"
DEFAULT_API_URL = "https://uskpjocrgzwskvsttzxc.supabase.co/functions/v1/rss-cyberstats"

# Environment variables (loaded from .env by the CLI)
ENV_API_KEY = "CYBERSTATS_API_KEY"
ENV_API_URL = "CYBERSTATS_API_URL"
ENV_SITE_URL = "CYBERSTATS_SITE_URL"
