"""Export command: validate an export file and write it again."""

from argparse import Namespace
from pathlib import Path

from vehicle_store.config import Paths
from vehicle_store.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class ExportHandler(BaseCommandHandler):
    """Re-serializes a JSON export as JSON or CSV in the export folder."""

    async def execute(self, args: Namespace) -> None:
        serializer = self.container.serializer
        source: Path = Paths.expand_path(args.source)

        snapshot = serializer.read_file(source)
        logger.info(
            "Loaded %d vehicles (%d events, %d ownership records) "
            "from schema %s",
            len(snapshot.vehicles),
            snapshot.event_count,
            snapshot.ownership_record_count,
            snapshot.schema_version,
        )

        if args.format == "csv":
            path = serializer.write_csv(snapshot)
        else:
            path = serializer.write_to_file(snapshot)
        logger.info("✅ Export written to %s", path)
