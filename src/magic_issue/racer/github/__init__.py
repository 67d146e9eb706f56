"""GitHub REST transport, wire models and response classification."""

__all__: list[str] = []
