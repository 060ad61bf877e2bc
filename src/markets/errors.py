from __future__ import annotations

from typing import Iterable


class MalformedCatalog(ValueError):
    """Catalog rows failed validation; the query cannot be answered."""

    def __init__(self, reasons: Iterable[str], source: str | None = None):
        self.reasons = list(reasons)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"{len(self.reasons)} malformed catalog row(s){where}: " + "; ".join(self.reasons))
