# complement_engine/providers/current_file.py
# Words of the document being edited, minus the token currently under the cursor.

from __future__ import annotations

from complement_engine.core.protocols import TokenizerProtocol, WorkspaceProtocol
from complement_engine.core.strings import all_alphabets
from complement_engine.core.word import Word
from complement_engine.providers.base import WordProvider


class CurrentFileWordProvider(WordProvider):
    name = "current_file"

    def __init__(self, workspace: WorkspaceProtocol, tokenizer: TokenizerProtocol) -> None:
        super().__init__()
        self.workspace = workspace
        self.tokenizer = tokenizer

    async def refresh_words(self, only_english: bool = False) -> None:
        editor = self.workspace.get_current_editor()
        content = self.workspace.get_active_file_content()
        if editor is None or content is None:
            self.clear_words()
            return

        cursor = editor.get_cursor()
        before_cursor = self.tokenizer.tokenize(editor.get_line(cursor.line)[: cursor.ch])
        current_token = before_cursor[-1] if before_cursor else None

        tokens = self.tokenizer.tokenize(content)
        if only_english:
            tokens = [t for t in tokens if all_alphabets(t)]

        # dict keeps first-seen order
        uniq = dict.fromkeys(t for t in tokens if t != current_token)
        self._publish_words(Word(value=t) for t in uniq)
