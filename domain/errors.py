"""Domain-level exceptions raised while building the taxonomy and redirect tables."""


class TaxonomyValidationError(ValueError):
    """The taxonomy data is ambiguous or malformed."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        detail = "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(f"Invalid taxonomy ({len(self.problems)} problem(s)):\n{detail}")


class RedirectConfigError(ValueError):
    """Legacy redirect entries whose target would be redirected again."""

    def __init__(self, chains: list[tuple[str, str, str]]) -> None:
        self.chains = list(chains)
        detail = "\n".join(f"  - {src} -> {dst} -> {nxt}" for src, dst, nxt in self.chains)
        super().__init__(f"Legacy redirects form chains ({len(self.chains)}):\n{detail}")
