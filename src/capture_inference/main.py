"""Application entrypoint — start the API server or classify one capture."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import uvicorn

from capture_inference.client import make_client
from capture_inference.config import get_settings
from capture_inference.errors import InferenceError
from capture_inference.logger import setup_logging
from capture_inference.models import CaptureEnvelope, CaptureType


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="capture-inference",
        description="Classify wearable baby-care captures into activity labels.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── serve ─────────────────────────────────────────────────
    serve_parser = sub.add_parser("serve", help="Start the API server.")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")

    # ── infer ─────────────────────────────────────────────────
    infer_parser = sub.add_parser("infer", help="Classify one capture and print the result as JSON.")
    infer_parser.add_argument(
        "--type",
        dest="capture_type",
        required=True,
        choices=[c.value for c in CaptureType],
    )
    infer_parser.add_argument("path", type=Path, help="Photo/audio file, or segment manifest for shortVideo.")
    infer_parser.add_argument(
        "--captured-at",
        type=datetime.fromisoformat,
        default=None,
        help="ISO-8601 capture start (default: now).",
    )

    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    if args.command == "serve":
        uvicorn.run(
            "capture_inference.api.server:app",
            host=args.host or settings.api_host,
            port=args.port or settings.api_port,
            reload=args.reload,
        )
    elif args.command == "infer":
        client = make_client(settings)
        if client is None:
            print("GEMINI_API_KEY is not set.", file=sys.stderr)
            sys.exit(2)

        envelope = CaptureEnvelope(
            capture_type=CaptureType(args.capture_type),
            local_media_path=args.path,
            captured_at=args.captured_at or datetime.now(timezone.utc),
        )
        try:
            result = asyncio.run(client.infer(envelope))
        except InferenceError as exc:
            print(f"{type(exc).__name__}: {exc.detail}", file=sys.stderr)
            sys.exit(1)

        payload = result.model_dump(mode="json")
        payload["needs_review"] = result.needs_review(settings.review_confidence_threshold)
        print(json.dumps(payload, indent=2))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
