"""
reelpress - Article to Social Content Pipeline

Extracts long-form articles from the web, adapts them into short-form
social media posts, stories, reels and carousels, and prepares template
driven video reels for an external rendering provider.
"""

__version__ = "0.1.0"
__author__ = "Keith Teare"
__email__ = "keith@teare.com"
