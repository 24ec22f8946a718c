import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from gitbig.core.observability import configure_logging
from gitbig.models import ActivityRecord
from gitbig.services.graph_service import InvalidEndDateError
from gitbig.services.graph_service import build_graph_artifacts
from gitbig.services.graph_service import levels_document
from gitbig.services.graph_service import parse_end_date
from gitbig.settings import Settings


logger = logging.getLogger(__name__)

SVG_FILENAME = "git-big.svg"
DARK_SVG_FILENAME = "git-big-dark.svg"
LIGHT_SVG_FILENAME = "git-big-light.svg"
LEVELS_FILENAME = "git-big-levels.json"


class ActivityInputError(Exception):
    """Raised when the activities file cannot be read or has the wrong shape."""


def load_activities(path: Path) -> list[ActivityRecord]:
    """Read activities from a JSON list or an object with an ``activities`` list.

    Entries that do not validate as activity records are skipped.
    """

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ActivityInputError(f"Cannot read activities from {path}: {exc}") from exc

    if isinstance(payload, dict):
        payload = payload.get("activities")
    if not isinstance(payload, list):
        raise ActivityInputError(f"Activities file {path} must contain a list")

    activities: list[ActivityRecord] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        try:
            activities.append(ActivityRecord.model_validate(item))
        except ValidationError:
            logger.warning("Skipping invalid activity record: %r", item)

    return activities


def write_artifacts(
    activities: list[ActivityRecord],
    output_dir: Path,
    end_date_value: str | None,
    title: str | None,
) -> list[Path]:
    end_date = parse_end_date(end_date_value)
    artifacts = build_graph_artifacts(activities, end_date=end_date, title=title)

    output_dir.mkdir(parents=True, exist_ok=True)
    contents = {
        SVG_FILENAME: artifacts.dark_svg,
        DARK_SVG_FILENAME: artifacts.dark_svg,
        LIGHT_SVG_FILENAME: artifacts.light_svg,
        LEVELS_FILENAME: levels_document(artifacts.levels_by_date),
    }

    written: list[Path] = []
    for filename, content in contents.items():
        path = output_dir / filename
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s (%d bytes)", path, len(content))
        written.append(path)

    return written


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitbig",
        description="Render activity durations as a contribution graph SVG",
    )
    parser.add_argument(
        "--input", type=Path, required=True, help="JSON file with activity records"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(settings.output_dir),
        help=f"Directory for generated files (default: {settings.output_dir})",
    )
    parser.add_argument(
        "--end-date",
        default=settings.end_date,
        help="Last day of the graph as YYYY-MM-DD (default: today, UTC)",
    )
    parser.add_argument("--title", default=settings.graph_title, help="SVG title text")
    parser.add_argument(
        "--log-level", default=settings.log_level, help="Logging level (e.g. DEBUG)"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    settings = Settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(settings.model_copy(update={"log_level": args.log_level}))

    try:
        activities = load_activities(args.input)
        written = write_artifacts(activities, args.output_dir, args.end_date, args.title)
    except (ActivityInputError, InvalidEndDateError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    for path in written:
        print(f"Generated {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
