from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ArticleReply:
    id: str
    text: str
    type: str
    reference: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "type": self.type, "reference": self.reference}


@dataclass
class MatchCandidate:
    """One article returned by the search service.

    Only `is_match` is written by the matcher; everything else is read-only.
    """

    id: str
    text: str
    urls: list[str] = field(default_factory=list)
    replies: list[ArticleReply] = field(default_factory=list)
    is_match: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "hyperlinks": [{"url": u} for u in self.urls],
            "articleReplies": [{"reply": r.to_dict()} for r in self.replies],
            "ismatch": self.is_match,
        }
