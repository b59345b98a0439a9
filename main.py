"""SHACL -> ShEx Translator: CLI entry point.

Usage:
    python main.py --input FILE|URL [--output FILE] [--format shexc|shexj] [--shapemap]
    python main.py --input-dir DIR --output-dir DIR [--format shexc|shexj] [--shapemap]

Options --strict, --approximate-xone and --no-annotations tune the conversion;
--verbose and --log-file control logging.
"""
from __future__ import annotations

import argparse
import os
import sys

from loguru import logger
from rdflib.util import guess_format

from shacl2shex import (
    ConversionOptions,
    InvalidInput,
    Shacl2ShexError,
    convert_shacl_to_shex,
    parse_shacl_file,
    serialize_json,
    serialize_shex,
    shape_map_from_graph,
    write_shape_map,
)

OUTPUT_EXTENSIONS = {"shexc": ".shex", "shexj": ".json"}


def configure_logging(verbose: bool = False, log_file: str | None = None):
    """Send shacl2shex logs to stderr and, optionally, to a file."""
    logger.remove()
    logger.enable("shacl2shex")
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
    if log_file:
        logger.add(log_file, level="DEBUG")


def shape_map_path(output_path: str) -> str:
    return os.path.splitext(output_path)[0] + ".shapemap"


def convert_file(
    input_path: str,
    output_path: str | None = None,
    fmt: str = "shexc",
    options: ConversionOptions | None = None,
    shapemap: bool = False,
) -> str:
    """Convert a single file.

    Args:
        input_path: Path or URL of the SHACL document.
        output_path: Optional output file path. If None, only returns the result.
        fmt: 'shexc' or 'shexj'.
        options: Conversion options.
        shapemap: Also write a fixed shape map next to ``output_path``.

    Returns:
        The converted output string.
    """
    graph = parse_shacl_file(input_path)
    if not graph.shape_terms():
        raise InvalidInput(f"No shapes found in {input_path}")

    conversion = convert_shacl_to_shex(graph, options)
    for warning in conversion.warnings:
        logger.warning(warning)

    if fmt == "shexc":
        result = serialize_shex(conversion.schema)
    elif fmt == "shexj":
        result = serialize_json(conversion.schema)
    else:
        raise ValueError(f"Unknown format: {fmt!r}")

    if output_path:
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(result)
        if shapemap:
            entries = shape_map_from_graph(graph, conversion.labels)
            with open(shape_map_path(output_path), "w", encoding="utf-8") as f:
                f.write(write_shape_map(entries, graph.prefixes))

    logger.info(f"{input_path}: {len(conversion.schema.shapes)} shapes, "
                f"{len(conversion.warnings)} warnings")
    return result


def convert_batch(
    input_dir: str,
    output_dir: str,
    fmt: str = "shexc",
    options: ConversionOptions | None = None,
    shapemap: bool = False,
) -> tuple[int, int]:
    """Convert all RDF files in a directory.

    Returns:
        (success_count, failure_count)
    """
    os.makedirs(output_dir, exist_ok=True)
    ext_out = OUTPUT_EXTENSIONS[fmt]

    ok = 0
    fail = 0

    for filename in sorted(os.listdir(input_dir)):
        if guess_format(filename) is None:
            continue

        input_path = os.path.join(input_dir, filename)
        output_name = os.path.splitext(filename)[0] + ext_out
        output_path = os.path.join(output_dir, output_name)

        try:
            convert_file(input_path, output_path, fmt, options, shapemap)
            print(f"  OK  {filename} -> {output_name}")
            ok += 1
        except Shacl2ShexError as e:
            print(f"  FAIL {filename}: {e}")
            logger.debug(f"{filename}: {e!r}")
            fail += 1

    return ok, fail


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="SHACL -> ShEx Translator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--input", "-i",
        help="Input file path or URL",
    )
    parser.add_argument(
        "--output", "-o",
        help="Output file path (default: stdout)",
    )
    parser.add_argument(
        "--format", "-f",
        choices=sorted(OUTPUT_EXTENSIONS),
        default="shexc",
        help="Output syntax (default: shexc)",
    )
    parser.add_argument(
        "--input-dir",
        help="Input directory for batch conversion",
    )
    parser.add_argument(
        "--output-dir",
        help="Output directory for batch conversion",
    )
    parser.add_argument(
        "--shapemap",
        action="store_true",
        help="Write a .shapemap file with the SHACL targets next to each output",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on unsupported constructs instead of dropping them",
    )
    parser.add_argument(
        "--approximate-xone",
        action="store_true",
        help="Translate sh:xone as a plain OR",
    )
    parser.add_argument(
        "--no-annotations",
        action="store_true",
        help="Do not attach rdfs:comment annotations for approximations",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug messages",
    )
    parser.add_argument(
        "--log-file",
        help="Also write the log to this file",
    )

    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    options = ConversionOptions(
        annotate=not args.no_annotations,
        strict=args.strict,
        exact_xone=not args.approximate_xone,
    )

    if args.input_dir and args.output_dir:
        ok, fail = convert_batch(args.input_dir, args.output_dir, args.format,
                                 options, args.shapemap)
        print(f"\nConverted {ok} files, {fail} failed")
        if fail:
            sys.exit(1)
        return

    if args.input:
        if args.shapemap and not args.output:
            parser.error("--shapemap requires --output")
        try:
            result = convert_file(args.input, args.output, args.format, options, args.shapemap)
        except Shacl2ShexError as e:
            logger.error(str(e))
            sys.exit(1)
        if not args.output:
            print(result)
        return

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
