"""Path cursor — the consumed / remaining split of the request path.

Every path-based predicate rides on ``PathCursor.consume``. Nested
matchers work because each successful consume moves a segment from
``remaining`` to ``consumed``::

    # remaining = "/doctors/account"
    cursor.consume("doctors", captures)
    # consumed = "/doctors", remaining = "/account"
"""

import re
from dataclasses import dataclass
from functools import lru_cache

Snapshot = tuple[str, str]


@lru_cache(maxsize=512)
def compile_segment(pattern: str) -> re.Pattern[str]:
    """Anchor *pattern* to one or more whole segments at the start of a path.

    The match must begin right after a ``/`` and end at another ``/`` or
    at the end of the path, so ``user`` never matches inside ``/users``.
    """
    return re.compile(rf"\A/({pattern})(?:(/)|\Z)")


@dataclass(slots=True)
class PathCursor:
    """Mutable consumed-prefix / remaining-path pair for one dispatch.

    Invariant: ``consumed + remaining`` equals the path the outermost
    attempt started from. ``on()`` snapshots and restores the cursor
    around every attempt.
    """

    consumed: str = ""
    remaining: str = ""

    def snapshot(self) -> Snapshot:
        return self.consumed, self.remaining

    def restore(self, snapshot: Snapshot) -> None:
        self.consumed, self.remaining = snapshot

    def consume(self, pattern: str, captures: list[str | None]) -> bool:
        """Consume the leading segment(s) matching *pattern*.

        On success the matched text moves to ``consumed``, ``remaining``
        keeps the separator that followed the match (or becomes empty at
        the end of the path), and the pattern's own groups are appended to
        *captures*. On failure nothing changes.
        """
        match = compile_segment(pattern).match(self.remaining)
        if match is None:
            return False

        # Group 1 is the whole segment, the last group the trailing
        # separator; everything in between belongs to the caller's pattern.
        separator = match.re.groups
        segment, *groups, _ = match.groups()

        self.consumed += f"/{segment}"
        if match.group(separator) is None:
            self.remaining = ""
        else:
            self.remaining = self.remaining[match.start(separator) :]
        captures.extend(groups)
        return True
