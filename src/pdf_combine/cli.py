#!/usr/bin/env python
"""
Command-line interface for PDF Combine.

Usage:
    pdf-combine <input> [<input> ...] [--output NAME] [--output-dir DIR] [options]

Examples:
    # Combine two PDFs and a photo, in that order
    pdf-combine intro.pdf scan.jpg appendix.pdf --output report.pdf

    # Combine every PDF/JPEG/PNG in a folder, sorted by name
    pdf-combine ./pages --output-dir ./out
"""

import sys
from pathlib import Path

# Add src directory to path for imports when running as script
_src_dir = Path(__file__).parent.parent
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import argparse
import logging

from pdf_combine import __version__
from pdf_combine.config import get_config

logger = logging.getLogger("pdf_combine")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NO_SUPPORTED_FILES = 2
EXIT_INTERRUPTED = 130


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="pdf-combine",
        description="PDF Combine - merge PDFs and JPEG/PNG images into a single PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Combine files in the given order:
    pdf-combine intro.pdf scan.jpg appendix.pdf --output report.pdf

  Combine a folder (files sorted by name):
    pdf-combine ./pages --output-dir ./out
        """
    )

    parser.add_argument(
        "inputs",
        nargs="+",
        help="Input PDF/JPEG/PNG files or folders, in output order"
    )

    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output filename; must end in .pdf (default: combined.pdf)"
    )

    parser.add_argument(
        "--output-dir", "-d",
        default=".",
        help="Directory for the combined PDF (default: current directory)"
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
        version=f"%(prog)s {__version__}"
    )

    return parser


def check_dependencies() -> bool:
    """Check if required dependencies are available."""
    missing = []

    try:
        import fitz
    except ImportError:
        missing.append("pymupdf")

    try:
        import PIL
    except ImportError:
        missing.append("Pillow")

    if missing:
        logger.error("Missing required dependencies:")
        for dep in missing:
            logger.error(f"  - {dep}")
        logger.error("\nInstall with: pip install -e .")
        return False

    return True


def run_pipeline(args) -> int:
    """Classify the inputs, assemble them and write the PDF."""
    from pdf_combine.utils.assembler import DocumentAssembler
    from pdf_combine.utils.errors import AssemblyError, NoSupportedFilesError
    from pdf_combine.utils.io import load_input_files, write_output, format_bytes
    from pdf_combine.utils.items import WorkingSet

    config = get_config()
    if config.debug_mode:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        inputs = load_input_files(args.inputs)
    except FileNotFoundError as e:
        logger.error(str(e))
        return EXIT_FAILED

    working_set = WorkingSet()
    try:
        working_set.add_files(inputs)
    except NoSupportedFilesError as e:
        logger.warning(e.summary)
        return EXIT_NO_SUPPORTED_FILES

    if not len(working_set):
        logger.warning("No input files found")
        return EXIT_NO_SUPPORTED_FILES

    def report(percent: int):
        if not args.quiet:
            print(f"\rCombining... {percent:3d}%", end="", flush=True)

    assembler = DocumentAssembler(config=config)
    try:
        result = assembler.assemble_sync(working_set, output_name=args.output, on_progress=report)
    except AssemblyError as e:
        if not args.quiet:
            print()
        logger.error(assembler.status.message)
        logger.debug(f"{e.kind}: {e}")
        return EXIT_FAILED

    output_path = write_output(result.data, args.output_dir, result.filename)

    if not args.quiet:
        print()
        print("=" * 60)
        print(assembler.status.message)
        print("=" * 60)
        print(f"Output: {output_path}")
        print(f"Pages: {result.page_count}")
        print(f"Size: {format_bytes(len(result.data))}")
        print()
        for index, item in enumerate(working_set, 1):
            print(f"  {index:3d}. [{item.kind.value}] {item.name} ({format_bytes(item.size_bytes)})")
        print("=" * 60)

    return EXIT_OK


def main(argv=None):
    """Main entry point."""
    parser = setup_argparser()
    args = parser.parse_args(argv)

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    if not check_dependencies():
        sys.exit(EXIT_FAILED)

    try:
        exit_code = run_pipeline(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.verbose:
            raise
        sys.exit(EXIT_FAILED)


if __name__ == "__main__":
    main()
