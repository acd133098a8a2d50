from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from media_resolver.models import CanonicalMediaItem, SourceKind


def normalize(raw: Mapping[str, Any], source_kind: SourceKind) -> CanonicalMediaItem:
    """Build the canonical item from adapter or fallback output.

    ``genres`` and ``metadata`` default to empty containers, ``None`` values are
    dropped so model defaults apply, and the source is stamped last so adapter
    output can never override it.
    """
    fields = {key: value for key, value in raw.items() if value is not None}
    fields["genres"] = [str(genre) for genre in raw.get("genres") or []]
    fields["metadata"] = dict(raw.get("metadata") or {})
    fields["source"] = source_kind
    return CanonicalMediaItem.model_validate(fields)


__all__ = ["normalize"]
