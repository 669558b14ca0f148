import os
import sys
import logging
import argparse
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List
from urllib.parse import urlparse

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..models.conversion_result import ConversionResult
from ..models.errors import FetchFailed
from ..pipeline.convert import MAX_DIM, convert_image
from ..repositories.image_repository import ImageRepository
from ..services.image_service import ImageService

OUTPUT_FILENAME = os.getenv("OUTPUT_FILENAME", "roblox-image-data.json")

logger = logging.getLogger("pixelporter.cli")


def is_url(value: str) -> bool:
    return value.startswith(("http://", "https://", "data:"))


def output_stem(value: str) -> str:
    """File stem used for the JSON written for one input."""
    if value.startswith("data:"):
        return Path(OUTPUT_FILENAME).stem
    if is_url(value):
        stem = Path(urlparse(value).path).stem
        return stem or Path(OUTPUT_FILENAME).stem
    return Path(value).stem


def output_targets(inputs: List[str], out_dir: Path) -> List[Path]:
    """
    One JSON path per input, in input order.
    Repeated stems get -1, -2, ... so no input overwrites another's output.
    """
    targets = []
    taken = set()
    for value in inputs:
        stem = output_stem(value)
        candidate = stem
        n = 0
        while candidate in taken:
            n += 1
            candidate = f"{stem}-{n}"
        taken.add(candidate)
        targets.append(out_dir / f"{candidate}.json")
    return targets


def convert_one(value: str, max_dim: int, image_service: ImageService) -> ConversionResult:
    if is_url(value):
        return convert_image(url=value, max_dim=max_dim, image_service=image_service)

    path = Path(value)
    try:
        data = image_service.image_repository.read_file(path)
    except FetchFailed as err:
        logger.error(f"Conversion of {path.name} failed ({err.kind}): {err.message}")
        return ConversionResult(source_name=path.name, error=err)
    return convert_image(data, filename=path.name, max_dim=max_dim, image_service=image_service)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixelporter-convert",
        description="Convert images (files or URLs) to Roblox pixel-grid JSON.",
    )
    parser.add_argument("inputs", nargs="+", help="Image files or http(s)/data URLs")
    parser.add_argument("-d", "--out-dir", type=Path, default=Path("."),
                        help="Directory for <stem>.json outputs (default: current directory)")
    parser.add_argument("-o", "--output", type=Path,
                        help="Exact output path (only with a single input)")
    parser.add_argument("--max-dim", type=int, default=MAX_DIM,
                        help=f"Maximum output width/height (default: {MAX_DIM})")
    parser.add_argument("--indent", type=int, default=None,
                        help="Pretty-print JSON with this indent")
    parser.add_argument("--stdout", action="store_true",
                        help="Write JSON to stdout instead of files (single input only)")
    parser.add_argument("--preview", action="store_true",
                        help="Also write <stem>.preview.png rebuilt from the grid")
    parser.add_argument("-j", "--workers", type=int, default=1,
                        help="Convert this many inputs in parallel")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr,
    )

    single_only = [flag for flag, used in (("--output", args.output), ("--stdout", args.stdout)) if used]
    if single_only and len(args.inputs) != 1:
        parser.error(f"{single_only[0]} requires exactly one input")
    if args.max_dim < 1:
        parser.error("--max-dim must be positive")
    if args.workers < 1:
        parser.error("--workers must be positive")

    image_service = ImageService(ImageRepository())

    with ThreadPoolExecutor(max_workers=args.workers) as pool:
        results = list(pool.map(lambda v: convert_one(v, args.max_dim, image_service), args.inputs))

    targets = [args.output] if args.output else output_targets(args.inputs, args.out_dir)

    failures = 0
    for value, result, target in zip(args.inputs, results, targets):
        if not result.ok:
            failures += 1
            print(f"✗ {value}: {result.summary}", file=sys.stderr)
            continue

        payload = result.grid.to_json(indent=args.indent)
        if args.stdout:
            sys.stdout.write(payload + "\n")
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(payload, encoding="utf-8")

        if args.preview:
            preview_path = target.with_name(f"{target.stem}.preview.png")
            image_service.grid_to_pil(result.grid).save(preview_path)

        print(f"✓ {value} → {target} ({result.summary})", file=sys.stderr)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
