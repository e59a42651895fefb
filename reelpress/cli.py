"""
Command-line interface for reelpress.
"""
import sys
import json
import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import tqdm
from dotenv import load_dotenv

from reelpress.core.adapter import ContentAdapter
from reelpress.core.article import Article, ArticleLink
from reelpress.core.content import AUDIENCES, CONTENT_FORMATS, TONES, AdaptationOptions
from reelpress.core.extractor import ArticleExtractor, ParsingOptions
from reelpress.core.generator import ReelGenerator
from reelpress.core.processor import ContentProcessor
from reelpress.core.reel import ASPECT_RATIOS, OUTPUT_FORMATS, RESOLUTIONS, ReelOptions
from reelpress.errors import FetchError, ReelpressError
from reelpress.formatters.markdown import MarkdownFormatter
from reelpress.formatters.records import to_record

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="reelpress - turn articles into social media content")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Extract articles and print them as JSON")
    extract.add_argument("urls", nargs="*", help="Article URLs")
    extract.add_argument("--links", help="File with one article URL per line")
    extract.add_argument("--max-attempts", type=int, help="Fetch attempts per article")

    adapt = subparsers.add_parser("adapt", help="Extract an article and adapt it for social media")
    adapt.add_argument("url", help="Article URL")
    adapt.add_argument("--format", dest="target_format", choices=CONTENT_FORMATS, default="post")
    adapt.add_argument("--tone", choices=TONES, help="Tone of the opening hook")
    adapt.add_argument("--audience", choices=AUDIENCES, help="Audience the call to action addresses")
    adapt.add_argument("--max-length", type=int, help="Maximum caption length")
    adapt.add_argument("--no-hashtags", action="store_true", help="Leave out hashtags")
    adapt.add_argument("--no-cta", action="store_true", help="Leave out the call to action")
    adapt.add_argument("--markdown", action="store_true", help="Print a Markdown preview instead of JSON")

    reel = subparsers.add_parser("reel", help="Print the render request for an article reel")
    reel.add_argument("url", help="Article URL")
    reel.add_argument("--template", dest="template_id", help="Pin a template id")
    reel.add_argument("--resolution", choices=RESOLUTIONS)
    reel.add_argument("--aspect-ratio", choices=ASPECT_RATIOS)
    reel.add_argument("--output-format", choices=OUTPUT_FORMATS)
    reel.add_argument("--duration", type=float, help="Explicit duration in seconds")

    subparsers.add_parser("templates", help="List the available reel templates")

    return parser.parse_args(argv)


def read_links(args: argparse.Namespace) -> List[ArticleLink]:
    urls = list(args.urls)
    if args.links:
        lines = Path(args.links).read_text(encoding="utf-8").splitlines()
        urls.extend(line.strip() for line in lines if line.strip() and not line.startswith("#"))
    return [ArticleLink(url=url) for url in urls]


def print_json(value) -> None:
    print(json.dumps(to_record(value), indent=2, ensure_ascii=False))


async def extract_one(url: str) -> Optional[Article]:
    async with ArticleExtractor() as extractor:
        article = await extractor.extract(ArticleLink(url=url))
    if article is None:
        logger.warning(f"No usable article content at {url}")
    return article


async def run_extract(args: argparse.Namespace) -> int:
    links = read_links(args)
    if not links:
        logger.error("No article URLs given")
        return 2

    options = ParsingOptions(max_attempts=args.max_attempts) if args.max_attempts else None

    processor = ContentProcessor()
    try:
        with tqdm.tqdm(total=len(links), desc="Extracting articles", file=sys.stderr) as pbar:
            outcomes = await processor.process_links(links, options, on_progress=lambda _: pbar.update(1))
    finally:
        await processor.close()

    print_json(outcomes)
    return 0 if all(o.status != 'failed' for o in outcomes) else 1


async def run_adapt(args: argparse.Namespace) -> int:
    article = await extract_one(args.url)
    if article is None:
        return 1

    overrides = {
        'tone': args.tone,
        'target_audience': args.audience,
        'max_length': args.max_length,
    }
    options = AdaptationOptions(
        target_format=args.target_format,
        include_hashtags=not args.no_hashtags,
        include_call_to_action=not args.no_cta,
        **{key: value for key, value in overrides.items() if value is not None},
    )
    content = ContentAdapter().adapt(article, options)

    if args.markdown:
        print(MarkdownFormatter().format_content(content), end="")
    else:
        print_json(content)
    return 0


async def run_reel(args: argparse.Namespace) -> int:
    article = await extract_one(args.url)
    if article is None:
        return 1

    overrides = {
        'template_id': args.template_id,
        'resolution': args.resolution,
        'aspect_ratio': args.aspect_ratio,
        'output_format': args.output_format,
        'duration': args.duration,
    }
    options = ReelOptions(**{key: value for key, value in overrides.items() if value is not None})
    request = ReelGenerator().build_article_request(article, options)
    print(json.dumps(request.to_payload(), indent=2, ensure_ascii=False))
    return 0


def run_templates(args: argparse.Namespace) -> int:
    print_json(ReelGenerator().registry.list())
    return 0


async def async_main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the application.
    """
    load_dotenv(override=True)
    args = parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    try:
        if args.command == "extract":
            return await run_extract(args)
        if args.command == "adapt":
            return await run_adapt(args)
        if args.command == "reel":
            return await run_reel(args)
        return run_templates(args)
    except FetchError as e:
        logger.error(str(e))
        return 1
    except (ReelpressError, ValueError) as e:
        logger.error(f"Invalid request: {e}")
        return 2


def main() -> None:
    sys.exit(asyncio.run(async_main()))


if __name__ == "__main__":
    main()
