# complement_engine/providers/internal_link.py
# Titles of other documents as link candidates. Casing is preserved exactly.

from __future__ import annotations

from complement_engine.core.protocols import WorkspaceProtocol
from complement_engine.core.word import Word
from complement_engine.providers.base import WordProvider


class InternalLinkWordProvider(WordProvider):
    name = "internal_link"

    def __init__(self, workspace: WorkspaceProtocol) -> None:
        super().__init__()
        self.workspace = workspace

    def refresh_words(self) -> None:
        words = [
            Word(
                value=t.title,
                description=t.path or None,
                aliases=tuple(a for a in t.aliases if a),
                internal_link=True,
            )
            for t in self.workspace.get_link_targets()
            if t.title
        ]
        self._publish_words(words, with_aliases=True)
