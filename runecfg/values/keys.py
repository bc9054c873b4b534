"""Key canonicalisation."""


def canonical_key(name: str) -> str:
    """Canonical snake_case spelling used for storage (`log-level` -> `log_level`)."""
    return name.replace("-", "_")


def split_path(path: str) -> tuple[str, ...]:
    """Split a dotted query path into canonical segments; empty segments are dropped."""
    return tuple(canonical_key(segment) for segment in path.split(".") if segment)
