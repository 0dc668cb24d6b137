#!/usr/bin/env python3
"""
Seed a StreamGuide channel from a JSON video catalog

Upserts the channel, removes its existing programs, and schedules the
catalog back to back from yesterday 00:00 for the given number of days.

Usage:
    python scripts/seed_database.py data/channel-musicbox.json [--days 10]

Options:
    --channel-id     Channel slug (default: music-box)
    --database-url   Override database.url from config.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

from streamguide.config import load_config
from streamguide.database import Channel, get_sync_session, init_sync_db
from streamguide.errors import ScheduleError
from streamguide.scheduling import timeline
from streamguide.seeding import BATCH_SIZE, DEFAULT_DAYS, default_start, load_catalog, seed_channel

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Seed a channel's schedule from a JSON video catalog"
    )
    parser.add_argument("catalog", type=Path, help="Path to the JSON catalog")
    parser.add_argument("--channel-id", default="music-box", help="Channel slug")
    parser.add_argument("--channel-name", default="MusicBox", help="Channel display name")
    parser.add_argument("--description", default="Non-stop music videos")
    parser.add_argument("--color", default="#f59e0b")
    parser.add_argument("--logo", default="MB")
    parser.add_argument("--days", type=int, default=DEFAULT_DAYS, help="Days to schedule")
    parser.add_argument("--batch-size", type=int, default=BATCH_SIZE)
    parser.add_argument("--database-url", help="Database URL (defaults to config)")

    args = parser.parse_args()

    try:
        config = load_config()
        init_sync_db(args.database_url)

        catalog = load_catalog(args.catalog)
        logger.info(f"Found {len(catalog)} videos in {args.catalog}.")

        channel = Channel(
            id=args.channel_id,
            name=args.channel_name,
            description=args.description,
            color=args.color,
            logo=args.logo,
        )
        start = default_start(timeline.current_time(config.guide.timezone))

        with get_sync_session() as session:
            stats = seed_channel(
                session,
                channel,
                catalog,
                start,
                days=args.days,
                batch_size=args.batch_size,
            )

        logger.info(
            f"Seeding completed: {stats['inserted']} of {stats['programs']} programs inserted, "
            f"{stats['failed_batches']} failed batches"
        )
        if stats["failed_batches"] > 0:
            sys.exit(1)

    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    except ScheduleError as e:
        logger.error(e.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
