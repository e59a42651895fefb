"""
Text analysis utilities for reelpress.
"""
import math
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from reelpress.config import get_config

WORDS_PER_MINUTE = 200

_SENTENCE_SPLIT = re.compile(r'[.!?]+')
_LONG_WORD = re.compile(r'\b\w{8,}\b')
_SEMESTER = re.compile(r'(\d+)\.\s*Semester', re.IGNORECASE)
_QUOTED_SPAN = re.compile(r'"([^"]+)"|“([^”]+)”|„([^“"]+)[“"]|»([^«]+)«')


class TextAnalyzer:
    """
    Rule-based text heuristics used when extracting and adapting articles.

    Everything here is pure: the same text always produces the same result.
    """
    def __init__(
        self,
        study_areas: Optional[Dict[str, List[str]]] = None,
        base_hashtags: Optional[Sequence[str]] = None,
        hashtag_keywords: Optional[Sequence[str]] = None,
        importance_markers: Optional[Sequence[str]] = None,
        key_point_markers: Optional[Sequence[str]] = None,
        max_hashtags: Optional[int] = None,
        max_quotes: Optional[int] = None,
    ):
        """Initialize the analyzer, falling back to configured vocabularies."""
        # Checked in order, the first area with a matching keyword wins
        self.study_areas = study_areas or get_config('analysis.study_areas', {})
        self.base_hashtags = list(base_hashtags or get_config('social.base_hashtags', []))
        self.hashtag_keywords = list(hashtag_keywords or get_config('social.hashtag_keywords', []))
        self.importance_markers = [
            m.lower() for m in (importance_markers or get_config('social.importance_markers', []))
        ]
        # Key points also pick up these, on top of the importance markers
        self.key_point_markers = self.importance_markers + [
            m.lower() for m in (key_point_markers or get_config('social.key_point_markers', []))
        ]
        self.max_hashtags = max_hashtags or get_config('social.max_hashtags', 15)
        self.max_quotes = max_quotes or get_config('social.max_quotes', 5)

    # Sentences

    @staticmethod
    def split_sentences(text: str) -> List[str]:
        """
        Split text on terminal punctuation.

        Returns:
            Stripped sentence bodies without their terminators
        """
        if not text:
            return []
        return [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]

    def summarize(self, text: str, max_length: int) -> str:
        """
        Greedily accumulate whole sentences while the result fits in max_length.

        Accumulation stops at the first sentence that would overflow; no
        sentence is ever cut.
        """
        summary = ''
        for sentence in self.split_sentences(text):
            candidate = f"{summary} {sentence}." if summary else f"{sentence}."
            if len(candidate) > max_length:
                break
            summary = candidate
        return summary

    def generate_summary(self, text: str, max_sentences: Optional[int] = None,
                         max_chars: Optional[int] = None) -> str:
        """
        Summary stored on an article: the leading sentences within a character limit.

        Unlike ``summarize`` the result is never empty for non-empty text; an
        oversized first sentence is cut to the limit with an ellipsis.
        """
        max_sentences = max_sentences or get_config('summary.max_sentences', 3)
        max_chars = max_chars or get_config('summary.max_chars', 300)

        sentences = self.split_sentences(text)
        if not sentences:
            return ''

        summary = self.summarize(' '.join(f"{s}." for s in sentences[:max_sentences]), max_chars)
        if not summary:
            summary = sentences[0][:max(0, max_chars - 3)].rstrip() + '...'
        return summary

    # Metrics

    @staticmethod
    def word_count(text: str) -> int:
        return len(text.split())

    def read_time(self, text: str) -> int:
        """Minutes to read at 200 words per minute, rounded up."""
        return math.ceil(self.word_count(text) / WORDS_PER_MINUTE)

    def assess_difficulty(self, text: str) -> str:
        """
        Classify difficulty from the share of words with 8+ characters.

        Returns:
            'beginner' below 10%, 'intermediate' below 20%, else 'advanced'
        """
        words = self.word_count(text)
        if words == 0:
            return 'beginner'

        ratio = len(_LONG_WORD.findall(text)) / words
        if ratio < 0.1:
            return 'beginner'
        if ratio < 0.2:
            return 'intermediate'
        return 'advanced'

    def extract_study_area(self, title: str, content: str, category: str) -> str:
        text = f"{title} {content} {category}".lower()
        for area, keywords in self.study_areas.items():
            if any(re.search(rf'\b{re.escape(keyword.lower())}\b', text) for keyword in keywords):
                return area
        return 'general'

    @staticmethod
    def extract_semester(content: str) -> Optional[str]:
        match = _SEMESTER.search(content)
        return f"{match.group(1)}. Semester" if match else None

    # Social media heuristics

    def generate_hashtags(self, title: str, content: str, category: str) -> Tuple[str, ...]:
        text = f"{title} {content} {category}".lower()

        hashtags: List[str] = []
        for tag in self.base_hashtags + [f"#{k}" for k in self.hashtag_keywords if k.lower() in text]:
            if tag not in hashtags:
                hashtags.append(tag)

        return tuple(hashtags[:self.max_hashtags])

    def _has_marker(self, sentence: str, markers: Iterable[str]) -> bool:
        lower = sentence.lower()
        return any(marker in lower for marker in markers)

    def extract_key_quotes(self, text: str) -> Tuple[str, ...]:
        """
        Pick up to ``max_quotes`` short, quotable excerpts.

        Literal quotations (20-200 characters) are preferred, then sentences
        carrying an importance marker, then the three longest sentences.
        """
        quotes: List[str] = []
        for match in _QUOTED_SPAN.finditer(text):
            quote = next(group for group in match.groups() if group is not None).strip()
            if 20 < len(quote) < 200:
                quotes.append(quote)

        sentences = self.split_sentences(text)

        if not quotes:
            quotes = [
                s for s in sentences
                if 40 < len(s) < 200 and self._has_marker(s, self.importance_markers)
            ]

        if not quotes:
            quotes = sorted(sentences, key=len, reverse=True)[:3]

        return tuple(quotes[:self.max_quotes])

    def extract_key_points(self, text: str, count: int) -> List[str]:
        """
        Marker-bearing sentences first, padded with the longest remaining ones.
        """
        sentences = self.split_sentences(text)

        marked = [s for s in sentences if self._has_marker(s, self.key_point_markers)]
        if len(marked) >= count:
            return [f"{s}." for s in marked[:count]]

        remaining = sorted((s for s in sentences if s not in marked), key=len, reverse=True)
        points = marked + remaining[:count - len(marked)]
        return [f"{s}." for s in points]

    @staticmethod
    def assess_adaptability(text: str, has_images: bool) -> bool:
        return len(text) > 100 and has_images

    @staticmethod
    def suggest_formats(text: str, gallery_size: int, has_images: bool) -> Tuple[str, ...]:
        formats = ['post']
        if gallery_size > 1:
            formats.append('carousel')
        if len(text) < 500:
            formats.append('story')
        if has_images:
            formats.append('reel')
        return tuple(formats)

    def assess_quality(self, text: str, has_images: bool) -> str:
        words = self.word_count(text)
        if words > 800 and has_images:
            return 'high'
        if words > 400 or has_images:
            return 'medium'
        return 'low'
