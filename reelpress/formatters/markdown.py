"""
Markdown formatting utilities for reelpress.
"""
import logging
from typing import List

from reelpress.core.content import ModifiedContent

logger = logging.getLogger(__name__)


class MarkdownFormatter:
    """
    Formats adapted content into a Markdown preview for review.
    """
    def format_content(self, content: ModifiedContent) -> str:
        """
        Format one piece of adapted content.

        Args:
            content: The adapted content

        Returns:
            Markdown with the caption text, slide captions and images
        """
        lines: List[str] = [
            f"# {content.format.capitalize()} preview",
            "",
            f"*Source: [{content.metadata.source_url}]({content.metadata.source_url})*  ",
            f"*Content id: `{content.id}`*",
            "",
            "## Caption",
            "",
        ]
        lines.extend(self._quote(content.content.text))

        if content.content.captions:
            lines.extend(["", "## Slides", ""])
            lines.extend(f"{i}. {caption}" for i, caption in enumerate(content.content.captions, start=1))

        if content.content.images:
            lines.extend(["", "## Images", ""])
            lines.extend(f"![image {i}]({url})" for i, url in enumerate(content.content.images, start=1))

        return "\n".join(lines) + "\n"

    @staticmethod
    def _quote(text: str) -> List[str]:
        return [f"> {line}" if line else ">" for line in text.split("\n")]
