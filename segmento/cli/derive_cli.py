import argparse
import json
import logging
import sys
from pathlib import Path

from segmento.errors import SegmentoError
from segmento.helpers.logging import configure_logging, log_timing

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Derive playback segments from a caption file"
    )
    parser.add_argument("captions", help="Path to a .json or .txt caption file")
    parser.add_argument(
        "--duration", type=float, help="Media duration in seconds"
    )
    parser.add_argument(
        "--video", help="Probe the duration from this video when --duration is omitted"
    )
    parser.add_argument(
        "--output", help="Write the segment list here instead of stdout"
    )
    return parser


def _get_derive_segments_from_file():
    from segmento.steps.segment import derive_segments_from_file

    return derive_segments_from_file


def _get_probe_media_duration():
    from segmento.helpers.media import probe_media_duration

    return probe_media_duration


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging()

    duration = args.duration
    if duration is None and args.video:
        duration = _get_probe_media_duration()(Path(args.video))
    if duration is None:
        parser.error("a media duration is required (use --duration or a probeable --video)")

    captions_path = Path(args.captions)
    derive = _get_derive_segments_from_file()
    try:
        text = captions_path.read_text(encoding="utf-8-sig")
        with log_timing(f"Deriving segments from {captions_path.name}", logger):
            segments, warnings = derive(captions_path.name, text, duration)
    except (OSError, UnicodeDecodeError, SegmentoError) as exc:
        parser.error(str(exc))

    for warning in warnings:
        print(warning, file=sys.stderr)

    payload = json.dumps(
        [segment.to_dict() for segment in segments], ensure_ascii=False, indent=2
    )
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
    else:
        print(payload)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
