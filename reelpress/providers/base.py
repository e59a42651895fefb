"""
Contract for external video rendering providers.
"""
from abc import ABC, abstractmethod

from reelpress.core.reel import RenderRequest, RenderResult


class VideoRenderingProvider(ABC):
    """
    Renders a template with modifications into a video.

    Implementations talk to a rendering service; failures should surface as
    exceptions (``reelpress.errors.RenderError`` where the provider can
    classify them) and are passed through to the caller unchanged.
    """

    @abstractmethod
    async def render(self, request: RenderRequest) -> RenderResult:
        """
        Render a video.

        Args:
            request: Template id, modifications and output settings

        Returns:
            The rendered video's location and properties
        """

    async def health_check(self) -> None:
        """Raise if the provider is not usable. Called once on service start."""
        return None
