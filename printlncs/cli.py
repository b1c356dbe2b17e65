"""
CLI entry points for 2-up conversion.
"""

# Standard Library
import argparse
import sys

# local repo modules
import printlncs as pl
import printlncs.config
import printlncs.errors
import printlncs.measure
import printlncs.pipeline


LayoutConfig = pl.config.LayoutConfig

VERSION = pl.config.VERSION
DEFAULT_PAPER = pl.config.DEFAULT_PAPER
DEFAULT_PADDING = pl.config.DEFAULT_PADDING
DEFAULT_BOTTOM = pl.config.DEFAULT_BOTTOM
DEFAULT_BETWEEN = pl.config.DEFAULT_BETWEEN
DEFAULT_KEY_PAGES = pl.config.DEFAULT_KEY_PAGES
DEFAULT_TOOL_TIMEOUT = pl.config.DEFAULT_TOOL_TIMEOUT
DEFAULT_MAX_WORKERS = pl.config.DEFAULT_MAX_WORKERS


#============================================
def key_pages_type(value: str) -> tuple[int, ...]:
	"""
	argparse type for --key-pages.
	"""
	try:
		return pl.measure.parse_key_pages(value)
	except ValueError as error:
		raise argparse.ArgumentTypeError(str(error)) from None


#============================================
def positive_float(value: str) -> float:
	"""
	argparse type for values that must be above zero.
	"""
	try:
		number = float(value)
	except ValueError:
		raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
	if number <= 0:
		raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
	return number


#============================================
def build_config(args: argparse.Namespace) -> LayoutConfig:
	"""
	Build layout config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		LayoutConfig.
	"""
	scale = args.scale
	if not args.scaling:
		scale = 1.0
	config = LayoutConfig(
		paper=args.paper,
		scale=scale,
		padding=args.padding,
		bottom=args.bottom,
		between=args.between,
		key_pages=args.key_pages,
		timeout=args.timeout,
		max_workers=args.jobs,
		keep_intermediate=args.keep_intermediate,
		verbose=args.verbose,
		quiet=args.quiet,
	)
	return config


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(
		prog="printlncs",
		description="Lay out a PDF or PostScript document two pages per sheet.",
	)
	parser.add_argument("input", help="PDF or PostScript file.")
	parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output path (default: <name>.2up.<ext>).")
	output_group.add_argument("--keep-intermediate", dest="keep_intermediate", action="store_true", help="Keep intermediate PostScript files next to the output.")
	output_group.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Run verbosely.")
	output_group.add_argument("-q", "--quiet", dest="quiet", action="store_true", help="Run quietly.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("--scale", dest="scale", type=positive_float, default=None, help="Scale by FACTOR instead of fitting automatically.")
	layout_group.add_argument("--no-scale", dest="scaling", action="store_false", help="Do not scale (same as --scale 1).")
	layout_group.add_argument("--paper", dest="paper", choices=sorted(pl.config.PAPER_SIZES), default=DEFAULT_PAPER, help="Paper size.")
	layout_group.add_argument("--padding", dest="padding", type=float, default=DEFAULT_PADDING, help="Points of padding around the pages.")
	layout_group.add_argument("--bottom", dest="bottom", type=float, default=DEFAULT_BOTTOM, help="Points added to the bottom margin.")
	layout_group.add_argument("--between", "--left", dest="between", type=float, default=DEFAULT_BETWEEN, help="Points added between the pages.")
	layout_group.add_argument(
		"--key-pages",
		dest="key_pages",
		type=key_pages_type,
		default=DEFAULT_KEY_PAGES,
		help="Pages to measure bounding boxes on, e.g. 1,2,3 or 1..5 (default: 1..5).",
	)

	tool_group = parser.add_argument_group("External tools")
	tool_group.add_argument("--timeout", dest="timeout", type=positive_float, default=DEFAULT_TOOL_TIMEOUT, help="Seconds allowed per external tool run.")
	tool_group.add_argument("-j", "--jobs", dest="jobs", type=int, default=DEFAULT_MAX_WORKERS, help="Pages measured concurrently.")

	parser.set_defaults(
		scaling=True,
		keep_intermediate=False,
		verbose=False,
		quiet=False,
	)

	args = parser.parse_args(argv)
	if args.verbose and args.quiet:
		parser.error("--verbose and --quiet are exclusive")
	if args.jobs < 1:
		parser.error("--jobs must be at least 1")
	return args


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	config = build_config(args)
	if not config.quiet:
		print(f"printlncs version {VERSION}")
	try:
		result = pl.pipeline.run_pipeline(args.input, config, args.output_path)
	except pl.errors.PrintlncsError as error:
		print(f"error: {error}", file=sys.stderr)
		sys.exit(1)
	print(f"generated {result.output_path}")


if __name__ == "__main__":
	main()
