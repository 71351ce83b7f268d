from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from ..file import read_file, write_file
from ..header import Header
from ..rendering import (
    DEFAULT_PREVIEW_HEIGHT,
    DEFAULT_PREVIEW_WIDTH,
    PreviewSettings,
    load_image,
    preview_from_image,
    preview_to_image,
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="exrpreview",
        description="Inspect, extract and embed preview images stored in image file headers.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    info = commands.add_parser("info", help="Show the header attributes and preview size")
    info.add_argument("path", help="Container file to inspect")

    extract = commands.add_parser("extract", help="Save the preview as an image (.png recommended)")
    extract.add_argument("path", help="Container file holding a preview")
    extract.add_argument("output", help="Image file to write")

    embed = commands.add_parser("embed", help="Store a preview built from an image")
    embed.add_argument("image", help="Source image (.png/.jpg/...)")
    embed.add_argument("path", help="Container file to update or create")
    embed.add_argument("--width", type=int, default=DEFAULT_PREVIEW_WIDTH, help="Maximum preview width")
    embed.add_argument("--height", type=int, default=DEFAULT_PREVIEW_HEIGHT, help="Maximum preview height")
    return parser.parse_args(argv)


def show_info(path: str) -> int:
    with read_file(path) as image_file:
        header = image_file.header
        preview = header.preview_image()
        if preview is None:
            print("preview: none")
        else:
            print(f"preview: {preview.width}x{preview.height}")
        for name, attribute in header.items():
            if attribute.type_name == "preview":
                continue
            print(f"{name} ({attribute.type_name}): {attribute.value!r}")
        print(f"payload: {len(image_file.payload)} bytes")
    return 0


def extract_preview(path: str, output: str) -> int:
    with read_file(path) as image_file:
        preview = image_file.header.preview_image()
        if preview is None:
            raise RuntimeError(f"No preview image in {path}")
        preview_to_image(preview).save(output)
        print(f"Saved {preview.width}x{preview.height} preview to {output}")
    return 0


def embed_preview(image_path: str, path: str, width: int, height: int) -> int:
    source = load_image(image_path)
    settings = PreviewSettings(max_width=width, max_height=height)
    with preview_from_image(source, settings) as preview:
        if os.path.exists(path):
            image_file = read_file(path)
            header, payload = image_file.header, image_file.payload
        else:
            header, payload = Header.from_dimensions(source.width, source.height), b""
        with header:
            header.set_preview_image(preview)
            write_file(path, header, payload)
        print(f"Embedded {preview.width}x{preview.height} preview into {path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "info":
            return show_info(args.path)
        if args.command == "extract":
            return extract_preview(args.path, args.output)
        return embed_preview(args.image, args.path, args.width, args.height)
    except Exception as exc:
        logger.debug("Command failed", exc_info=True)
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
