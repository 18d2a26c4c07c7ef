"""Markdown + LaTeX rendering of question and option text for the quiz view.

Architecture note:
    Question and option text may contain markdown and ``$...$`` math. The
    server converts the markdown to HTML and leaves the math delimiters in
    place so the browser can typeset them with MathJax. Nothing is cached:
    quizzes are small and rendering happens once per quiz fetch.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)
