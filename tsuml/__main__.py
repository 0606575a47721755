import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from .core.config import expand_inputs, find_tsconfig_file, load_config, read_tsconfig
from .core.constants import PLANTUML_IMAGE_EXTENSIONS, SUPPORTED_FORMATS
from .core.diagrams import RenderOptions, convert, render_plantuml
from .core.documentation import generate_documentation
from .core.errors import ConfigurationError, TsumlError


def setup_logging(log_level: str = "WARNING") -> None:
    """Configure application logging.

    Logs go to stderr so diagrams printed to stdout stay clean.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )
    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsuml",
        description="Generate UML class diagrams from TypeScript sources",
    )
    parser.add_argument(
        "-i", "--input",
        action="append",
        help="TypeScript file or glob; repeat for several"
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file. svg/png/txt are rendered by PlantUML; prints to stdout when omitted"
    )
    parser.add_argument(
        "-p", "--project",
        help="tsconfig.json file, or a directory containing one"
    )
    parser.add_argument(
        "-A", "--associations",
        action="store_true",
        default=None,
        help="Show associations between classes with cardinalities"
    )
    parser.add_argument(
        "-F", "--field-associations",
        action="store_true",
        default=None,
        help="Show associations between fields and classes with cardinalities"
    )
    parser.add_argument(
        "-I", "--only-interfaces",
        action="store_true",
        default=None,
        help="Only output interfaces"
    )
    parser.add_argument(
        "-C", "--only-classes",
        action="store_true",
        default=None,
        help="Only output classes"
    )
    parser.add_argument(
        "-L", "--colored-lines",
        dest="colored_association_lines",
        action="store_true",
        default=None,
        help="Color association lines"
    )
    parser.add_argument(
        "-f", "--format",
        type=str.lower,
        choices=SUPPORTED_FORMATS,
        help="Output markup"
    )
    parser.add_argument(
        "-T", "--target-class",
        help="Only output the hierarchy of this class or interface"
    )
    parser.add_argument(
        "--config",
        help="YAML config file (default: ./tsuml.yaml when present)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser


def merge_settings(args: argparse.Namespace, config: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay command-line values on the YAML config."""
    settings = dict(config)
    if isinstance(settings.get("input"), str):
        settings["input"] = [settings["input"]]
    for key, value in vars(args).items():
        if key in ("config", "log_level") or value is None:
            continue
        settings[key] = value
    return settings


def write_output(document: str, output: Optional[str], render_format: str) -> None:
    if output is None:
        print(document)
        return

    extension = os.path.splitext(output)[1].lstrip(".").lower()
    if extension in PLANTUML_IMAGE_EXTENSIONS:
        if render_format != "plantuml":
            raise ConfigurationError(f"Cannot render {render_format} output to .{extension}")
        with open(output, "wb") as f:
            f.write(render_plantuml(document, extension))
    else:
        with open(output, "w", encoding="utf-8") as f:
            f.write(document)
    logger.info(f"Wrote {output}")


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings = merge_settings(args, load_config(args.config))
    patterns = settings.get("input") or []
    if not patterns:
        raise ConfigurationError("Missing input file")

    files = expand_inputs(patterns)
    if not files:
        raise ConfigurationError(f"No input files match: {', '.join(patterns)}")

    options = RenderOptions.from_mapping(settings)

    tsconfig = find_tsconfig_file(files[0], settings.get("project"))
    compiler_options = read_tsconfig(tsconfig) if tsconfig else None
    if tsconfig:
        logger.info(f"Using compiler options from {tsconfig}")

    documentation = generate_documentation(files, compiler_options)
    write_output(convert(documentation, options), settings.get("output"), options.format)
    return 0


def main():
    """Main entry point for tsuml."""
    try:
        sys.exit(run())
    except (TsumlError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
