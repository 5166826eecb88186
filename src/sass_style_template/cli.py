"""Command-line entrypoint."""

from __future__ import annotations

import argparse
from pathlib import Path

from sass_style_template import __version__
from sass_style_template.compile import SassCompiler, VendorPrefixer
from sass_style_template.config import OUTPUT_STYLES, CliOverrides, load_effective_settings
from sass_style_template.errors import InvalidDestination
from sass_style_template.logging import ConsoleReporter, JsonlEventLog
from sass_style_template.output import prepare_destination
from sass_style_template.watch import WatchPipeline, WatchSession


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for pipeline startup configuration."""
    parser = argparse.ArgumentParser(
        prog="sass-style-template",
        description="Compile Sass sources and inject the CSS into style modules.",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=__version__, help="show version number"
    )
    parser.add_argument("-s", "--marker-start", default=None, help="start replace position")
    parser.add_argument("-e", "--marker-end", default=None, help="end replace position")
    parser.add_argument("-g", "--custom-glob", default=None, help="string pattern to be matched")
    parser.add_argument(
        "-f",
        "--css-file",
        action="store_true",
        default=None,
        help="generate css file instead of using template",
    )
    parser.add_argument(
        "-wo",
        "--wo-suffix",
        action="store_true",
        default=None,
        help="without suffix string `-styles`",
    )
    parser.add_argument("-j", "--js-file", default=None, help="file extension")
    parser.add_argument("-d", "--destination", default=None, help="location of the output file")
    parser.add_argument(
        "--hide-reload", action="store_true", default=None, help="do not print reload lines"
    )
    parser.add_argument("--output-style", choices=OUTPUT_STYLES, default=None)
    parser.add_argument(
        "--include-path",
        action="append",
        default=None,
        dest="include_paths",
        help="extra @import search path (repeatable)",
    )
    parser.add_argument("--event-log", default=None, help="append JSONL render events here")
    parser.add_argument("--once", action="store_true", help="render once and exit")
    return parser


def overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    return CliOverrides(
        marker_start=args.marker_start,
        marker_end=args.marker_end,
        custom_glob=args.custom_glob,
        css_file=args.css_file,
        wo_suffix=args.wo_suffix,
        js_file=args.js_file,
        destination=args.destination,
        hide_reload=args.hide_reload,
        output_style=args.output_style,
        include_paths=tuple(args.include_paths) if args.include_paths is not None else None,
        event_log=Path(args.event_log) if args.event_log is not None else None,
    )


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the watch process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    root = Path.cwd().resolve()
    reporter = ConsoleReporter()

    try:
        settings = load_effective_settings(root, overrides_from_args(args))
    except ValueError as error:
        reporter.error("CONFIG_ERROR", str(error))
        return 2

    options = settings.pipeline
    if options.destination_dir:
        # Without a destination there is nowhere to write; stop before watching.
        try:
            prepare_destination(options.destination_dir, root)
        except InvalidDestination as error:
            reporter.failure(error)
            return 2

    event_log = JsonlEventLog(settings.event_log) if settings.event_log is not None else None
    pipeline = WatchPipeline(
        options=options,
        compiler=SassCompiler(settings.compiler),
        post_processor=VendorPrefixer(),
        reporter=reporter,
        root=root,
        event_log=event_log,
    )
    result = pipeline.initialize()
    if args.once:
        return 1 if result.failed else 0

    session = WatchSession(pipeline)
    session.start()
    reporter.info(f"watching {', '.join(options.glob_patterns) or '(no patterns)'}")
    try:
        return session.run_forever()
    except KeyboardInterrupt:
        return 0
    finally:
        session.stop()


if __name__ == "__main__":
    raise SystemExit(main())
