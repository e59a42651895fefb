"""
Ordered field selectors used to read articles out of HTML pages.

Each article field has an ordered list of rules. A rule pairs a CSS selector
with a reader; the first rule whose selector matches and whose reader yields
a value wins. Supporting another site's markup means supplying a different
``SelectorTable``, the extraction flow stays the same.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag
from dateutil.parser import parse as parse_date

_WHITESPACE = re.compile(r'\s+')


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(' ', text).strip()


def read_text(tag: Tag) -> Optional[str]:
    text = normalize_whitespace(tag.get_text())
    return text or None


def read_attribute(name: str) -> Callable[[Tag], Optional[str]]:
    def reader(tag: Tag) -> Optional[str]:
        value = tag.get(name)
        if isinstance(value, list):
            value = ' '.join(value)
        return value.strip() if value and value.strip() else None
    return reader


def read_date(tag: Tag) -> Optional[datetime]:
    """
    Read a date from ``datetime``/``content`` attributes or the element text.

    Unparseable values yield None so the next rule gets a chance.
    """
    for candidate in (tag.get('datetime'), tag.get('content'), tag.get_text()):
        if not candidate or not str(candidate).strip():
            continue
        try:
            return parse_date(str(candidate).strip())
        except (ValueError, OverflowError):
            continue
    return None


def read_body(tag: Tag) -> Optional[Tuple[str, str]]:
    """Inner HTML and plain text of a content container."""
    text = normalize_whitespace(tag.get_text())
    if not text:
        return None
    return tag.decode_contents().strip(), text


@dataclass(frozen=True)
class SelectorRule:
    """
    A CSS selector and the reader applied to the first element it matches.
    """
    selector: str
    read: Callable[[Tag], Optional[Any]] = read_text

    def apply(self, soup: BeautifulSoup) -> Optional[Any]:
        element = soup.select_one(self.selector)
        if element is None:
            return None
        return self.read(element)


def first_match(soup: BeautifulSoup, rules: Sequence[SelectorRule]) -> Optional[Any]:
    for rule in rules:
        value = rule.apply(soup)
        if value is not None:
            return value
    return None


def _rules(*selectors: str, read: Callable[[Tag], Optional[Any]] = read_text) -> Tuple[SelectorRule, ...]:
    return tuple(SelectorRule(selector, read) for selector in selectors)


@dataclass(frozen=True)
class SelectorTable:
    """
    Rules for every extracted field, in priority order.
    """
    title: Tuple[SelectorRule, ...]
    subtitle: Tuple[SelectorRule, ...] = ()
    author: Tuple[SelectorRule, ...] = ()
    published: Tuple[SelectorRule, ...] = ()
    category: Tuple[SelectorRule, ...] = ()
    content: Tuple[SelectorRule, ...] = ()
    # Every element matching these contributes a tag / image
    tags: str = ''
    images: str = 'img'


# Markup conventions of WordPress-style magazine pages
DEFAULT_SELECTORS = SelectorTable(
    title=_rules(
        'h1.entry-title',
        'h1.post-title',
        'h1.article-title',
        '.entry-header h1',
        'article h1',
        'h1',
    ),
    subtitle=_rules(
        '.subtitle',
        '.excerpt',
        '.entry-subtitle',
        '.post-subtitle',
        'h2.subtitle',
    ),
    author=_rules(
        '.author',
        '.byline',
        '.entry-author',
        '.post-author',
    ) + _rules('meta[name="author"]', read=read_attribute('content')),
    published=_rules(
        '.published',
        '.date',
        'time',
        '.entry-date',
        '.post-date',
        'meta[property="article:published_time"]',
        read=read_date,
    ),
    category=_rules(
        '.category',
        '.tag',
        '.entry-category',
        '.post-category',
    ) + _rules('meta[property="article:section"]', read=read_attribute('content')),
    content=_rules(
        '.entry-content',
        '.post-content',
        '.article-content',
        '.content',
        'article .content',
        '.post-body',
        read=read_body,
    ),
    tags='.tag, .category, .keyword, .tags a, .categories a',
    images='img',
)
