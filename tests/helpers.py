"""
Shared test helpers

Fake rendering backends that record calls and can be told to fail.
"""

import html
from typing import Optional


class FakeLatexBackend:
    """记录调用的 LaTeX 后端"""

    def __init__(self, error: Optional[Exception] = None):
        self.calls: list[tuple[str, bool]] = []
        self.error = error

    def render(self, text: str, display_mode: bool = False) -> str:
        self.calls.append((text, display_mode))
        if self.error is not None:
            raise self.error
        mode = "display" if display_mode else "inline"
        return f'<span class="latex-math" data-mode="{mode}">{html.escape(text)}</span>'


class FakeTypstBackend:
    """记录调用的 Typst 后端"""

    def __init__(self, error: Optional[Exception] = None):
        self.calls: list[tuple[str, bool]] = []
        self.events: list[str] = []
        self.ready_calls = 0
        self.error = error

    @property
    def is_ready(self) -> bool:
        return self.ready_calls > 0

    async def ensure_ready(self) -> None:
        self.ready_calls += 1
        self.events.append("ready")

    def render(self, text: str, display_mode: bool = False) -> str:
        self.calls.append((text, display_mode))
        self.events.append("render")
        if self.error is not None:
            raise self.error
        mode = "typst-display" if display_mode else "typst-inline"
        return f'<span class="typst-math {mode}"><svg></svg></span>'
