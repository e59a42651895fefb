"""
Reel template registry.
"""
import logging
import threading
from typing import Iterable, Optional, Tuple

from reelpress.core.reel import ReelTemplate
from reelpress.errors import UnknownTemplateError

logger = logging.getLogger(__name__)

QUOTE_TEMPLATE = 'quote-template'
SLIDESHOW_TEMPLATE = 'slideshow-template'
TEXT_OVERLAY_TEMPLATE = 'text-overlay-template'
ANIMATED_TEXT_TEMPLATE = 'animated-text-template'

BUILTIN_TEMPLATES = (
    ReelTemplate(
        id=QUOTE_TEMPLATE,
        name='Quote Reel',
        description='An animated reel built around a quote from the article',
        type='quote',
        suitable_for=('motivational', 'educational'),
        preview_url='https://example.com/previews/quote-template.mp4',
    ),
    ReelTemplate(
        id=SLIDESHOW_TEMPLATE,
        name='Image Gallery',
        description='A slideshow of the article images',
        type='slideshow',
        suitable_for=('visual', 'gallery'),
        preview_url='https://example.com/previews/slideshow-template.mp4',
    ),
    ReelTemplate(
        id=TEXT_OVERLAY_TEMPLATE,
        name='Text Overlay',
        description='Text overlays on top of the article images',
        type='text_overlay',
        suitable_for=('informational', 'educational'),
        preview_url='https://example.com/previews/text-overlay-template.mp4',
    ),
    ReelTemplate(
        id=ANIMATED_TEXT_TEMPLATE,
        name='Animated Text',
        description='Animated text with transitions',
        type='animated_text',
        suitable_for=('promotional', 'announcement'),
        preview_url='https://example.com/previews/animated-text-template.mp4',
    ),
)


class TemplateRegistry:
    """
    Reel templates known to a generator, seeded with the built-ins.

    Registration and lookup are safe to call from several threads.
    """
    def __init__(self, templates: Optional[Iterable[ReelTemplate]] = None):
        self._lock = threading.Lock()
        self._templates = list(BUILTIN_TEMPLATES if templates is None else templates)

    def list(self) -> Tuple[ReelTemplate, ...]:
        with self._lock:
            return tuple(self._templates)

    def get(self, template_id: str) -> ReelTemplate:
        with self._lock:
            for template in self._templates:
                if template.id == template_id:
                    return template
        raise UnknownTemplateError(template_id)

    def register(self, template: ReelTemplate) -> None:
        """
        Add a custom template.

        Raises:
            ValueError: If a template with the same id exists
        """
        with self._lock:
            if any(t.id == template.id for t in self._templates):
                raise ValueError(f"Template {template.id!r} is already registered")
            self._templates.append(template)
        logger.info(f"Registered custom reel template {template.id} ({template.type})")

    def __contains__(self, template_id: object) -> bool:
        with self._lock:
            return any(t.id == template_id for t in self._templates)

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)
