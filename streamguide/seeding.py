"""
Seed a channel's schedule from a JSON video catalog.

The catalog is a list of objects with ``Title``, ``Description``,
``Video url``, ``Duration in seconds`` and ``Thumbnail url`` keys. Programs
are chained back to back from a start instant for a number of days,
cycling through the catalog.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from streamguide.database.models import Channel, ProgramRecord
from streamguide.errors import InvalidInputError
from streamguide.metadata.youtube import extract_video_id
from streamguide.playout.scheduler import fill_until
from streamguide.scheduling import timeline

logger = logging.getLogger(__name__)

BATCH_SIZE = 100
DEFAULT_DAYS = 10

REQUIRED_KEYS = ("Title", "Video url", "Duration in seconds")


@dataclass
class CatalogEntry:
    title: str
    description: Optional[str]
    video_url: str
    duration: int
    thumbnail: Optional[str]

    @property
    def video_id(self) -> str:
        return extract_video_id(self.video_url) or ""


def parse_catalog(items: List[Dict[str, Any]]) -> List[CatalogEntry]:
    """Validate raw catalog items."""
    entries = []
    for position, item in enumerate(items):
        missing = [key for key in REQUIRED_KEYS if key not in item]
        if missing:
            raise InvalidInputError(
                f"Catalog entry {position} is missing {', '.join(missing)}",
                {"position": position},
            )
        try:
            duration = int(item["Duration in seconds"])
        except (TypeError, ValueError) as e:
            raise InvalidInputError(
                f"Catalog entry {position} has an invalid duration",
                {"position": position},
            ) from e

        entries.append(
            CatalogEntry(
                title=item["Title"],
                description=item.get("Description"),
                video_url=item["Video url"],
                duration=duration,
                thumbnail=item.get("Thumbnail url"),
            )
        )
    return entries


def load_catalog(path: Path) -> List[CatalogEntry]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise InvalidInputError(f"Catalog {path} must contain a JSON list")
    return parse_catalog(data)


def default_start(now: datetime) -> datetime:
    """Yesterday 00:00, so today's early hours are covered."""
    return timeline.day_start(now.date() - timedelta(days=1))


def build_programs(
    catalog: List[CatalogEntry],
    channel_id: str,
    start: datetime,
    days: int = DEFAULT_DAYS,
) -> List[ProgramRecord]:
    """Chain catalog entries contiguously from ``start`` for ``days`` days."""
    until = start + timedelta(days=days)
    durations = [entry.duration for entry in catalog]

    records = []
    for index, program_start, program_end in fill_until(durations, start, until):
        entry = catalog[index]
        records.append(
            ProgramRecord(
                channel_id=channel_id,
                title=entry.title,
                description=entry.description,
                video_id=entry.video_id,
                thumbnail=entry.thumbnail,
                duration=entry.duration,
                start_time=program_start,
                end_time=program_end,
            )
        )
    return records


def upsert_channel(session: Session, channel: Channel) -> Channel:
    merged = session.merge(channel)
    session.commit()
    logger.info(f"Channel '{merged.name}' upserted.")
    return merged


def seed_channel(
    session: Session,
    channel: Channel,
    catalog: List[CatalogEntry],
    start: datetime,
    days: int = DEFAULT_DAYS,
    batch_size: int = BATCH_SIZE,
) -> Dict[str, int]:
    """
    Replace a channel's programs with a freshly chained schedule.

    Returns:
        Stats with ``programs``, ``inserted`` and ``failed_batches``.
    """
    upsert_channel(session, channel)

    logger.info(f"Cleaning up existing programs for channel '{channel.id}'...")
    session.execute(delete(ProgramRecord).where(ProgramRecord.channel_id == channel.id))
    session.commit()

    records = build_programs(catalog, channel.id, start, days)
    logger.info(f"Generated {len(records)} program entries from {len(catalog)} videos.")

    stats = {"programs": len(records), "inserted": 0, "failed_batches": 0}
    for offset in range(0, len(records), batch_size):
        batch = records[offset:offset + batch_size]
        batch_number = offset // batch_size + 1
        try:
            session.add_all(batch)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            stats["failed_batches"] += 1
            logger.error(f"Error inserting batch {batch_number}: {e}")
            continue

        stats["inserted"] += len(batch)
        logger.info(f"Inserted batch {batch_number} ({len(batch)} programs).")

    return stats
