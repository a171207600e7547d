#!/usr/bin/env python
"""Upload local image files to Twitter using credentials from .env."""

from __future__ import annotations

import argparse
import json
import mimetypes
import sys
from pathlib import Path

from tweetmedia.coordinator.batch import MediaUploadProcessor
from tweetmedia.core.config import configured_credentials, settings
from tweetmedia.core.errors import MediaUploadError
from tweetmedia.core.logging import configure_logging
from tweetmedia.host import ADDITIONAL_OWNERS, MEDIA_CATEGORY, Attachment, InputItem, StaticHost


def build_host(args: argparse.Namespace) -> StaticHost:
    """One item per path; the file becomes the item's default attachment."""
    items = []
    for path in args.paths:
        file_path = Path(path)
        mime_type, _ = mimetypes.guess_type(file_path.name)
        attachment = Attachment(
            mime_type=mime_type,
            payload=file_path.read_bytes(),
            file_name=file_path.name,
        )
        items.append(InputItem({settings.default_binary_property: attachment}))

    parameters = {ADDITIONAL_OWNERS: args.owners}
    if args.category is not None:
        parameters[MEDIA_CATEGORY] = args.category

    return StaticHost(
        credentials=configured_credentials(),
        items=items,
        parameters=parameters,
        continue_on_failure=args.continue_on_failure,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("paths", nargs="+", help="Image files to upload")
    parser.add_argument("--category", default=None, help="media_category (default from settings)")
    parser.add_argument("--owners", default=None, help="Comma-separated additional owner user IDs")
    parser.add_argument(
        "--continue-on-failure",
        action="store_true",
        default=settings.continue_on_failure,
        help="Record failed items and keep going",
    )
    args = parser.parse_args()
    configure_logging()

    try:
        results = MediaUploadProcessor(build_host(args)).run()
    except (MediaUploadError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps([r.to_json() for r in results], indent=2))
    if any(not r.success for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
