"""
Exceptions raised while building a 2-up document.
"""


class PrintlncsError(Exception):
	"Base class of exceptions thrown by this package"

	def __init__(self, msg: str):
		super().__init__(msg)
		self.msg = msg

	def __str__(self) -> str:
		return self.msg


class UnsupportedFormat(PrintlncsError):
	"Input or output extension the converters cannot handle"


class MissingDependency(PrintlncsError):
	"Required executable is not on PATH"

	def __init__(self, tool: str, package: str | None = None):
		msg = f"I cannot find {tool} in your executable path."
		if package:
			msg += f"\nNOTE: {tool} is packaged with {package}."
		super().__init__(msg)
		self.tool = tool
		self.package = package


class MeasurementFailure(PrintlncsError):
	"Page count or a sampled page's bounding box could not be read"


class DegenerateGeometry(PrintlncsError):
	"Content box with zero width or height"


class ExternalToolFailure(PrintlncsError):
	"External process exited non-zero or could not be started"

	def __init__(
		self,
		tool: str,
		stage: str,
		returncode: int | None = None,
		stderr: str = "",
		detail: str | None = None,
	):
		msg = detail or f"{tool} failed during {stage}"
		if returncode is not None:
			msg += f" (exit status {returncode})"
		last_line = stderr.strip().splitlines()[-1] if stderr.strip() else ""
		if last_line:
			msg += f": {last_line}"
		super().__init__(msg)
		self.tool = tool
		self.stage = stage
		self.returncode = returncode
		self.stderr = stderr


class ToolTimeout(ExternalToolFailure):
	"External process did not finish within its time limit"

	def __init__(self, tool: str, stage: str, timeout: float):
		detail = f"{tool} timed out after {timeout:g}s during {stage}"
		super().__init__(tool, stage, detail=detail)
		self.timeout = timeout
