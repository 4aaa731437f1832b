import argparse
import logging
import sys
from pathlib import Path

from ..config import load_settings
from .models import SummaryDocument, SummaryFormat
from .pipeline import SummaryRenderer


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render an AI-generated study summary to HTML or PDF")

    # Input/Output
    parser.add_argument("input_path", help="Path to the raw summary text")
    parser.add_argument("--format", "-f", default="smart", choices=[f.value for f in SummaryFormat], help="Summary format (default: smart)")
    parser.add_argument("--html", help="Write the HTML preview to this path (smart format only)")
    parser.add_argument("--pdf", help="Write the PDF export to this path")
    parser.add_argument("--text", help="Write the normalized text to this path")
    parser.add_argument("--title", default="", help="Document title used in the PDF header")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log heuristic decisions")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    renderer = SummaryRenderer(load_settings())
    try:
        raw = Path(args.input_path).read_text(encoding="utf-8")
        doc = SummaryDocument(
            format=args.format,
            title=args.title or Path(args.input_path).stem,
            content_raw=raw,
            cornell_notes=raw if args.format == SummaryFormat.CORNELL.value else None,
        )

        if args.text:
            Path(args.text).write_text(renderer.export_text(doc), encoding="utf-8")
            print(f"Saved to {args.text}")
        if args.html:
            Path(args.html).write_text(renderer.render_html(raw), encoding="utf-8")
            print(f"Saved to {args.html}")
        if args.pdf:
            Path(args.pdf).write_bytes(renderer.export_pdf(doc))
            print(f"Saved to {args.pdf}")
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
