"""
External document tools: lookup, process runs and the collaborator
used by the pipeline.
"""

# Standard Library
import dataclasses
import os
import shutil
import subprocess
import typing

# local repo modules
import printlncs as pl
import printlncs.config
import printlncs.errors
import printlncs.geometry
import printlncs.measure


Box = pl.geometry.Box

DEFAULT_TOOL_TIMEOUT = pl.config.DEFAULT_TOOL_TIMEOUT
PDF_EXT = pl.config.PDF_EXT
POSTSCRIPT_EXT = pl.config.POSTSCRIPT_EXT


@dataclasses.dataclass(frozen=True)
class ToolSpec:
	name: str
	package: str | None = None


TOOLS = {
	"pdftops": ToolSpec("pdftops", "poppler"),
	"pstopdf": ToolSpec("pstopdf"),
	"ps2pdf": ToolSpec("ps2pdf", "ghostscript"),
	"pstops": ToolSpec("pstops", "psutils ((La)TeX)"),
	"psselect": ToolSpec("psselect", "psutils ((La)TeX)"),
	"gs": ToolSpec("gs", "ghostscript"),
}

PAGE_COUNT_COMMENTS = ("%%Pages:", pl.measure.BEGIN_DOCUMENT, pl.measure.END_DOCUMENT)
BBOX_DEVICE_ARGS = ["-sDEVICE=bbox", "-dNOPAUSE", "-dBATCH", "-dQUIET", "-"]


class Collaborator(typing.Protocol):
	def page_count(self, ps_path: str) -> int: ...

	def measure_page(self, ps_path: str, page: int) -> Box: ...

	def convert(self, path: str, target_ext: str, dest: str) -> str: ...

	def impose(self, ps_path: str, expression: str, paper: str, dest: str) -> str: ...


#============================================
def require_tool(name: str) -> str:
	"""
	Resolve an executable on PATH.

	Args:
		name: Tool name from TOOLS.

	Returns:
		Absolute path of the executable.
	"""
	path = shutil.which(name)
	if path is None:
		tool_spec = TOOLS.get(name, ToolSpec(name))
		raise pl.errors.MissingDependency(tool_spec.name, tool_spec.package)
	return path


#============================================
def run_tool(
	args: list[str],
	stage: str,
	timeout: float = DEFAULT_TOOL_TIMEOUT,
	input_bytes: bytes | None = None,
) -> subprocess.CompletedProcess:
	"""
	Run an external tool and fail loudly on any problem.

	Args:
		args: Command line, tool name first.
		stage: Pipeline stage name for error messages.
		timeout: Seconds to wait before killing the process.
		input_bytes: Optional data for stdin.

	Returns:
		Completed process with stdout and stderr as bytes.
	"""
	tool = os.path.basename(args[0])
	executable = require_tool(args[0])
	try:
		result = subprocess.run(
			[executable] + args[1:],
			input=input_bytes,
			capture_output=True,
			timeout=timeout,
			check=False,
		)
	except subprocess.TimeoutExpired:
		raise pl.errors.ToolTimeout(tool, stage, timeout) from None
	except OSError as error:
		raise pl.errors.ExternalToolFailure(tool, stage, detail=f"{tool} could not start during {stage}: {error}") from error
	if result.returncode != 0:
		stderr = result.stderr.decode("utf-8", errors="replace")
		raise pl.errors.ExternalToolFailure(tool, stage, result.returncode, stderr)
	return result


#============================================
def read_page_count(ps_path: str) -> int:
	"""
	Read the declared page count of a PostScript file.

	Args:
		ps_path: PostScript path.

	Returns:
		Page count.
	"""
	lines = []
	with open(ps_path, "r", encoding="latin-1") as handle:
		for line in handle:
			if line.startswith(PAGE_COUNT_COMMENTS):
				lines.append(line)
	return pl.measure.parse_page_count("".join(lines), ps_path)


#============================================
def pdf_converter() -> list[str]:
	"""
	Pick the PostScript to PDF converter available on this system.

	Returns:
		Command prefix, either pstopdf or ps2pdf.
	"""
	if shutil.which("pstopdf"):
		return ["pstopdf"]
	if shutil.which("ps2pdf"):
		return ["ps2pdf"]
	tool_spec = TOOLS["ps2pdf"]
	raise pl.errors.MissingDependency(tool_spec.name, tool_spec.package)


#============================================
class PostScriptTools:
	"""
	Collaborator backed by poppler, psutils and ghostscript.
	"""

	def __init__(self, timeout: float = DEFAULT_TOOL_TIMEOUT):
		self.timeout = timeout

	def check(self, input_ext: str) -> None:
		"""
		Fail early when a tool needed for this input is missing.

		Args:
			input_ext: Input file extension.
		"""
		names = ["psselect", "gs", "pstops"]
		if input_ext == PDF_EXT:
			names.insert(0, "pdftops")
			pdf_converter()
		for name in names:
			require_tool(name)

	def page_count(self, ps_path: str) -> int:
		return read_page_count(ps_path)

	def measure_page(self, ps_path: str, page: int) -> Box:
		"""
		Select one page and run the bounding box device over it.

		Args:
			ps_path: PostScript path.
			page: 1-based page number.

		Returns:
			Content Box of the page.
		"""
		stage = f"page {page} measurement"
		selected = run_tool(["psselect", f"-p{page}", ps_path], stage, self.timeout)
		result = run_tool(["gs"] + BBOX_DEVICE_ARGS, stage, self.timeout, input_bytes=selected.stdout)
		# gs writes the bbox records to stderr
		output = result.stderr.decode("utf-8", errors="replace")
		output += result.stdout.decode("utf-8", errors="replace")
		box = pl.measure.parse_bounding_box(output)
		if box is None:
			raise pl.errors.MeasurementFailure(f"expected bounding box data for page {page} of {ps_path}")
		return box

	def convert(self, path: str, target_ext: str, dest: str) -> str:
		"""
		Convert between PDF and PostScript.

		Args:
			path: Source path.
			target_ext: Wanted extension, ".pdf" or ".ps".
			dest: Destination path.

		Returns:
			Path of the converted file, or path itself when no conversion is needed.
		"""
		source_ext = os.path.splitext(path)[1].lower()
		if source_ext == target_ext:
			return path
		stage = f"conversion of {path} to {target_ext}"
		if source_ext == PDF_EXT and target_ext == POSTSCRIPT_EXT:
			run_tool(["pdftops", path, dest], stage, self.timeout)
		elif source_ext == POSTSCRIPT_EXT and target_ext == PDF_EXT:
			command = pdf_converter()
			if command[0] == "pstopdf":
				run_tool(command + [path, "-o", dest], stage, self.timeout)
			else:
				run_tool(command + [path, dest], stage, self.timeout)
		else:
			raise pl.errors.UnsupportedFormat(f"I don't know how to convert {source_ext or 'no extension'} to {target_ext}!")
		return dest

	def impose(self, ps_path: str, expression: str, paper: str, dest: str) -> str:
		stage = f"imposition of {ps_path}"
		run_tool(["pstops", f"-p{paper}", expression, ps_path, dest], stage, self.timeout)
		return dest
