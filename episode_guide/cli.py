"""
episode-guide CLI - look up a series and print its episode list
"""
import argparse
import sys
from dataclasses import replace

from episode_guide.errors import EpisodeGuideError
from episode_guide.scraper.crawlers.tvdotcom import TVDotComClient
from episode_guide.utils.config import load_config, save_config
from episode_guide.utils.logger import logger, set_verbose


def format_episode(ep) -> str:
    airdate = f"  ({ep.airdate.isoformat()})" if ep.airdate else ""
    return f"S{ep.season:02d}E{ep.episode:02d}  {ep.title}{airdate}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="episode-guide",
        description="Fetch the episode list of a TV series from TV.com"
    )
    parser.add_argument("query", help="Series name to search for")
    parser.add_argument(
        "--season",
        type=int,
        default=None,
        help="Only fetch this season (default: all seasons)"
    )
    parser.add_argument(
        "--pick",
        type=int,
        default=0,
        help="Index of the search result to use (default: 0)"
    )
    parser.add_argument(
        "--link",
        action="store_true",
        help="Print the episode guide link instead of fetching episodes"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Max seasons fetched in parallel (overrides the config file)"
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Write the effective settings (including --workers) to the config file"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging"
    )
    return parser


def build_client(args) -> TVDotComClient:
    cfg = load_config()
    if args.workers is not None:
        cfg = replace(cfg, max_season_workers=args.workers)
    if args.save_config:
        save_config(cfg)
        logger.info(f"Saved settings (max_season_workers={cfg.max_season_workers})")
    return TVDotComClient(cfg=cfg)


def main(argv=None, client=None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        set_verbose(logger)

    if args.season is not None and args.season < 1:
        logger.error(f"Season must be positive: {args.season}")
        return 1

    client = client or build_client(args)
    try:
        results = client.search(args.query)
        if not results:
            logger.error(f"No results for {args.query!r}")
            return 1
        if not 0 <= args.pick < len(results):
            logger.error(f"--pick {args.pick} out of range (0..{len(results) - 1})")
            return 1

        series = results[args.pick]
        if args.link:
            print(client.get_episode_link(series, args.season))
            return 0

        episodes = client.get_episode_list(series, args.season)
        print(series.name)
        for ep in episodes:
            print(format_episode(ep))
        logger.info(f"{len(episodes)} episodes")
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except EpisodeGuideError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
