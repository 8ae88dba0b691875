#!/usr/bin/env python
"""
Command-line interface for the DOCX export pipeline.

Usage:
    python lipikor/cli.py --input <document.json> [--output <file.docx>] [options]

Examples:
    # Export for Google Docs (default profile)
    python lipikor/cli.py --input document.json --output report.docx

    # Export with Microsoft Word fonts
    python lipikor/cli.py --input document.json --output report.docx --target word
"""

import sys
from pathlib import Path

# Add package directory to path for imports when running as script
if not __package__:
    _src_dir = Path(__file__).parent
    if str(_src_dir) not in sys.path:
        sys.path.insert(0, str(_src_dir))

import argparse
import logging
from typing import List, Optional

logger = logging.getLogger("lipikor")


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Lipikor - Export a structured document JSON to DOCX",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Export for Google Docs:
    lipikor --input document.json --output report.docx

  Export with Microsoft Word fonts:
    lipikor --input document.json --output report.docx --target word
        """
    )

    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input document JSON file"
    )

    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output DOCX file (default: extracted_text.docx)"
    )

    parser.add_argument(
        "--target", "-t",
        choices=["word", "gdocs"],
        default=None,
        help="Target application font profile (default: gdocs)"
    )

    parser.add_argument(
        "--title",
        default=None,
        help="Document title stored in the package metadata"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    return parser


def run_export(args) -> int:
    """Run the export."""
    if __package__:
        from .config import get_config
        from .utils.errors import PackagingError, StructureError
        from .utils.export import DocxExporter
        from .utils.fonts import parse_profile
        from .utils.io import load_document
    else:
        from config import get_config
        from utils.errors import PackagingError, StructureError
        from utils.export import DocxExporter
        from utils.fonts import parse_profile
        from utils.io import load_document

    config = get_config()
    export_config = config.export
    if args.target:
        export_config.target_app = args.target
    profile = parse_profile(export_config.target_app)
    if args.title:
        export_config.title = args.title
    output_path = Path(args.output or export_config.output_filename)

    try:
        document = load_document(args.input)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(f"Invalid JSON in {args.input}: {e}")
        return 1
    except StructureError as e:
        logger.error(f"Invalid document structure: {e}")
        return 1

    exporter = DocxExporter(
        profile=profile,
        title=export_config.title,
        creator=export_config.creator,
        timestamp=export_config.timestamp,
    )

    try:
        exporter.export(document, output_path)
    except StructureError as e:
        logger.error(f"Invalid document structure: {e}")
        return 1
    except PackagingError as e:
        logger.error(str(e))
        if args.verbose or config.debug_mode:
            raise
        return 1

    if not args.quiet:
        print(f"Exported {len(document)} blocks ({profile.value}) to {output_path}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = setup_argparser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    try:
        return run_export(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
