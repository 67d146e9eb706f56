"""The race: one attempt per tick until a terminal outcome.

- `submitter`: posts the issue
- `attempt`: the read/compare/post decision for a single tick
- `poll_loop`: the fixed-interval scheduler and its terminal states
"""

__all__: list[str] = []
