#!/usr/bin/env python
"""Script to compress, blur-hash and upload local images to OSS."""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from moments.config import configure_logging
from moments.models import SelectedImage
from moments.services.ingestion import ImageIngestor
from moments.services.storage import storage_service


async def _run(paths: list[Path]) -> list[dict]:
    selections = [SelectedImage(data=path.read_bytes()) for path in paths]
    try:
        images = await ImageIngestor().ingest(selections)
    finally:
        await storage_service.close()
    return [image.model_dump(mode="json") for image in images]


def main() -> None:
    parser = argparse.ArgumentParser(description="Upload images for a Moments thought")
    parser.add_argument("paths", nargs="+", type=Path, help="Image files, in display order")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()

    configure_logging(args.log_level)
    descriptors = asyncio.run(_run(args.paths))
    print(json.dumps(descriptors, indent=2))


if __name__ == "__main__":
    main()
