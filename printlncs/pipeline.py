"""
Run the 2-up pipeline: convert, measure, compute, impose, convert back.
"""

# Standard Library
import dataclasses
import math
import os
import shutil
import tempfile
import time

# PIP3 modules
import pypdf
import pypdf.errors

# local repo modules
import printlncs as pl
import printlncs.config
import printlncs.errors
import printlncs.geometry
import printlncs.impose
import printlncs.measure
import printlncs.tools


LayoutConfig = pl.config.LayoutConfig
Transform = pl.impose.Transform

INPUT_EXTENSIONS = pl.config.INPUT_EXTENSIONS
PDF_EXT = pl.config.PDF_EXT
POSTSCRIPT_EXT = pl.config.POSTSCRIPT_EXT
TWO_UP_SUFFIX = pl.config.TWO_UP_SUFFIX


@dataclasses.dataclass
class RunResult:
	input_path: str
	output_path: str
	expression: str
	transform: Transform
	input_pages: int | None
	output_pages: int | None


#============================================
def report(config: LayoutConfig, message: str, verbose_only: bool = False) -> None:
	"""
	Print a progress line unless quiet.

	Args:
		config: Layout configuration.
		message: Text to print.
		verbose_only: Print only in verbose mode.
	"""
	if config.quiet:
		return
	if verbose_only and not config.verbose:
		return
	print(message)


#============================================
def default_output_path(input_path: str, directory: str | None = None) -> str:
	"""
	Build "<basename>.2up<ext>" in the working directory.

	Args:
		input_path: Input document path.
		directory: Output directory, defaults to the working directory.

	Returns:
		Output path.
	"""
	name, ext = os.path.splitext(os.path.basename(input_path))
	if directory is None:
		directory = os.getcwd()
	return os.path.join(directory, f"{name}{TWO_UP_SUFFIX}{ext}")


#============================================
def count_pdf_pages(path: str) -> int:
	"""
	Count the pages of a PDF with pypdf.

	Args:
		path: PDF path.

	Returns:
		Page count.
	"""
	try:
		reader = pypdf.PdfReader(path)
		return len(reader.pages)
	except (pypdf.errors.PyPdfError, OSError) as error:
		raise pl.errors.UnsupportedFormat(f"cannot read PDF {path}: {error}") from error


#============================================
def check_input(input_path: str) -> str:
	"""
	Validate the input file and return its lowercase extension.

	Args:
		input_path: Input document path.

	Returns:
		Extension such as ".pdf".
	"""
	if not os.path.isfile(input_path):
		raise pl.errors.PrintlncsError(f"Input file {input_path} does not exist.")
	ext = os.path.splitext(input_path)[1].lower()
	if ext not in INPUT_EXTENSIONS:
		raise pl.errors.UnsupportedFormat(f"unexpected extension: {ext or '(none)'}")
	return ext


#============================================
def keep_intermediates(paths: list[str], output_path: str, config: LayoutConfig) -> list[str]:
	"""
	Copy intermediate files next to the output.

	Existing files are never overwritten.

	Args:
		paths: Intermediate file paths.
		output_path: Final output path.
		config: Layout configuration.

	Returns:
		Paths of the copies that were written.
	"""
	directory = os.path.dirname(os.path.abspath(output_path))
	kept = []
	for path in paths:
		target = os.path.join(directory, os.path.basename(path))
		if os.path.exists(target):
			report(config, f"WARNING: not overwriting existing {target}.")
			continue
		shutil.copyfile(path, target)
		kept.append(target)
		report(config, f"Kept intermediate {target}.")
	return kept


#============================================
def run_pipeline(
	input_path: str,
	config: LayoutConfig,
	output_path: str | None = None,
	collaborator: pl.tools.Collaborator | None = None,
) -> RunResult:
	"""
	Turn a one-page-per-sheet document into a 2-up document.

	Intermediate files live in a temporary directory that is removed on
	every exit path. The output is moved into place only after every
	stage succeeded.

	Args:
		input_path: PDF or PostScript input.
		config: Layout configuration.
		output_path: Output path, defaults to "<basename>.2up<ext>" in the working directory.
		collaborator: External tool collaborator, defaults to PostScriptTools.

	Returns:
		RunResult.
	"""
	ext = check_input(input_path)
	if output_path is None:
		output_path = default_output_path(input_path)
	if collaborator is None:
		collaborator = pl.tools.PostScriptTools(config.timeout)
		collaborator.check(ext)

	name = os.path.splitext(os.path.basename(input_path))[0]
	input_pages = None
	if ext == PDF_EXT:
		input_pages = count_pdf_pages(input_path)
		report(config, f"Input pages: {input_pages}", verbose_only=True)

	start_time = time.perf_counter()
	with tempfile.TemporaryDirectory(prefix=f"{name}-") as tmpdir:
		ps_target = os.path.join(tmpdir, f"{name}{POSTSCRIPT_EXT}")
		if ext != POSTSCRIPT_EXT:
			report(config, f"Generating {os.path.basename(ps_target)} from {input_path}.")
		ps_path = collaborator.convert(input_path, POSTSCRIPT_EXT, ps_target)
		convert_end = time.perf_counter()

		content_box, pages = pl.measure.measure_content_box(
			collaborator,
			ps_path,
			config.key_pages,
			config.max_workers,
		)
		measure_end = time.perf_counter()
		report(config, f"bounding box: {content_box} -- average over pages {pages}", verbose_only=True)

		transform = pl.impose.compute_transform(content_box, config)
		for line in pl.impose.describe_transform(transform):
			report(config, line, verbose_only=True)
		if transform.shrinks:
			report(config, f"WARNING: scaling by {pl.geometry.format_number(transform.scale)}.")
		expression = pl.impose.format_expression(transform)
		report(config, f"expression: {expression}", verbose_only=True)

		ps2up_path = os.path.join(tmpdir, f"{name}{TWO_UP_SUFFIX}{POSTSCRIPT_EXT}")
		report(config, f"Generating {os.path.basename(ps2up_path)} from {os.path.basename(ps_path)}.")
		ps2up_path = collaborator.impose(ps_path, expression, config.paper, ps2up_path)
		impose_end = time.perf_counter()

		staged_path = ps2up_path
		if ext != POSTSCRIPT_EXT:
			staged_path = os.path.join(tmpdir, f"{name}{TWO_UP_SUFFIX}{ext}")
			report(config, f"Generating {os.path.basename(output_path)} from {os.path.basename(ps2up_path)}.")
			staged_path = collaborator.convert(ps2up_path, ext, staged_path)

		output_pages = None
		if ext == PDF_EXT:
			output_pages = count_pdf_pages(staged_path)
			expected_pages = math.ceil(input_pages / 2)
			if output_pages != expected_pages:
				raise pl.errors.ExternalToolFailure(
					"pstops",
					"imposition",
					detail=f"imposed document has {output_pages} pages, expected {expected_pages}",
				)
			report(config, f"Pages written: {output_pages}", verbose_only=True)

		if config.keep_intermediate:
			keep_intermediates(sorted({ps_path, ps2up_path} - {input_path}), output_path, config)
		shutil.move(staged_path, output_path)
	end_time = time.perf_counter()

	report(
		config,
		"Timing: convert={:.2f}s measure={:.2f}s impose={:.2f}s total={:.2f}s".format(
			convert_end - start_time,
			measure_end - convert_end,
			impose_end - measure_end,
			end_time - start_time,
		),
		verbose_only=True,
	)

	return RunResult(
		input_path=input_path,
		output_path=output_path,
		expression=expression,
		transform=transform,
		input_pages=input_pages,
		output_pages=output_pages,
	)
