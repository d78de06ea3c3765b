"""Command line entry point.

Usage:
    # Build news.json from the configured feeds
    easynews build --output ./output/news.json

    # Digests read a previously built news.json
    easynews serious-digest --input ./output/news.json
    easynews lifestyle --input ./output/news.json --output ./output/lifestyle.json
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from easynews.core.config import get_config
from easynews.core.container import container, override_pipeline_config
from easynews.core.exceptions import EasyNewsError
from easynews.core.logging import get_logger, setup_logging
from easynews.services.collector.output import NEWS_FILENAME, read_news_output
from easynews.services.digest.lifestyle import LIFESTYLE_FILENAME, write_lifestyle_digest
from easynews.services.digest.serious import SERIOUS_DIGEST_FILENAME, write_serious_digest

# Provider keys in .env must reach LiteLLM, which reads os.environ
load_dotenv()

logger = get_logger(__name__)


async def build_news(output: Path) -> None:
    """Run the merge-and-allocate pipeline and write news.json."""
    pipeline = container.news_pipeline()
    try:
        _, stats = await pipeline.run_to_file(output)
    finally:
        await container.http_client().close()

    logger.info(
        "Build finished",
        output=str(output),
        articles=stats.final_articles,
        feeds_failed=stats.feeds_failed,
    )


async def build_serious_digest(input_path: Path, output: Path) -> None:
    """Write serious-digest.json from news.json."""
    news = read_news_output(input_path)
    generator = container.serious_digest_generator()
    digest = await generator.generate(news)
    write_serious_digest(digest, output)
    logger.info("Serious digest finished", output=str(output), articles=len(digest.articles))


async def build_lifestyle(input_path: Path, output: Path) -> None:
    """Write lifestyle.json from news.json."""
    news = read_news_output(input_path)
    generator = container.lifestyle_digest_generator()
    digest = await generator.generate(news)
    write_lifestyle_digest(digest, output)
    logger.info("Lifestyle digest finished", output=str(output), articles=len(digest.articles))


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subcommand per artifact."""
    output_dir = Path(get_config().output_dir)

    parser = argparse.ArgumentParser(
        prog="easynews",
        description="Greek news in simple words",
    )
    parser.add_argument(
        "--config-dir",
        type=str,
        default=None,
        help="Directory with defaults.yaml and feeds.yaml (default: ./config)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Collect feeds and build news.json")
    build.add_argument(
        "--output",
        "-o",
        type=Path,
        default=output_dir / NEWS_FILENAME,
        help="Output file (default: <output_dir>/news.json)",
    )

    serious = subparsers.add_parser("serious-digest", help="Build serious-digest.json")
    lifestyle = subparsers.add_parser("lifestyle", help="Build lifestyle.json")
    for sub, filename in ((serious, SERIOUS_DIGEST_FILENAME), (lifestyle, LIFESTYLE_FILENAME)):
        sub.add_argument(
            "--input",
            "-i",
            type=Path,
            default=output_dir / NEWS_FILENAME,
            help="news.json to read (default: <output_dir>/news.json)",
        )
        sub.add_argument(
            "--output",
            "-o",
            type=Path,
            default=output_dir / filename,
            help=f"Output file (default: <output_dir>/{filename})",
        )

    return parser


async def run_command(args: argparse.Namespace) -> None:
    """Dispatch a parsed command under the run timeout."""
    if args.command == "build":
        coro = build_news(args.output)
    elif args.command == "serious-digest":
        coro = build_serious_digest(args.input, args.output)
    else:
        coro = build_lifestyle(args.input, args.output)

    await asyncio.wait_for(coro, timeout=get_config().run_timeout_seconds)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Process exit code
    """
    setup_logging()
    args = build_parser().parse_args(argv)

    try:
        if args.config_dir:
            with override_pipeline_config(args.config_dir):
                asyncio.run(run_command(args))
        else:
            asyncio.run(run_command(args))
    except EasyNewsError as e:
        logger.error("Run failed", **e.to_dict())
        return 1
    except TimeoutError:
        logger.error("Run timed out", timeout=get_config().run_timeout_seconds)
        return 1
    except KeyboardInterrupt:
        logger.info("Run cancelled by user")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
