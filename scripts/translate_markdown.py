from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from transview.config import Settings
from transview.languages import LANGUAGE_NAMES
from transview.models.messages import ChunkMessage, ErrorMessage, OutboundMessage, UpdateMessage
from transview.pipeline.session import PreviewSession
from transview.render.markdown import to_html
from transview.utils.logging_setup import setup_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Translate a local markdown file through the preview pipeline.")
    parser.add_argument("--input", required=True, help="Path to a markdown file")
    parser.add_argument(
        "--target-language",
        default=None,
        choices=list(LANGUAGE_NAMES),
        help="Target language code (defaults to PREVIEW_TARGET_LANGUAGE)",
    )
    parser.add_argument("--output", default=None, help="Write rendered HTML here instead of stdout")
    parser.add_argument("--markdown", action="store_true", help="Print translated markdown instead of HTML")
    parser.add_argument("--quiet", action="store_true", help="Do not echo streamed fragments to stderr")
    return parser.parse_args()


async def _run() -> int:
    args = _parse_args()
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input not found: {input_path}")

    settings = Settings()
    settings.preview.debounce_ms = 0
    setup_logging(settings)

    final: list[UpdateMessage] = []
    errors: list[ErrorMessage] = []

    async def _display(message: OutboundMessage) -> None:
        if isinstance(message, ChunkMessage) and not args.quiet:
            sys.stderr.write(message.text)
            sys.stderr.flush()
        elif isinstance(message, UpdateMessage):
            final.append(message)
        elif isinstance(message, ErrorMessage):
            errors.append(message)

    session = PreviewSession.from_settings(settings, display=_display, language_code=args.target_language)
    try:
        session.update_source(input_path.read_text(encoding="utf-8"))
        await session.wait_idle()
    finally:
        await session.close()

    if not args.quiet:
        sys.stderr.write("\n")
    if errors:
        print(f"translation failed [{errors[-1].error_code}]: {errors[-1].message}", file=sys.stderr)
        return 1
    if not final:
        print("translation produced no result", file=sys.stderr)
        return 1

    update = final[-1]
    out = update.full_text if args.markdown else to_html(session.rendered_lines)
    if args.output:
        Path(args.output).write_text(out, encoding="utf-8")
    else:
        print(out)
    return 0


def main() -> None:
    raise SystemExit(asyncio.run(_run()))


if __name__ == "__main__":
    main()
