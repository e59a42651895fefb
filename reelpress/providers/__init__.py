from reelpress.providers.base import VideoRenderingProvider

__all__ = ['VideoRenderingProvider']
