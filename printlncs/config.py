"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses

# PIP3 modules
import reportlab.lib.pagesizes


VERSION = "0.3.0"

DEFAULT_PAPER = "letter"
DEFAULT_PADDING = 10.0
DEFAULT_BOTTOM = 0.0
DEFAULT_BETWEEN = 0.0
DEFAULT_KEY_PAGES = (1, 2, 3, 4, 5)
DEFAULT_TOOL_TIMEOUT = 120.0
DEFAULT_MAX_WORKERS = 4

TWO_UP_SUFFIX = ".2up"
POSTSCRIPT_EXT = ".ps"
PDF_EXT = ".pdf"
INPUT_EXTENSIONS = (PDF_EXT, POSTSCRIPT_EXT)

# pstops knows paper sizes in whole points
PAPER_SIZES = {
	"letter": tuple(round(value) for value in reportlab.lib.pagesizes.letter),
	"a4": tuple(round(value) for value in reportlab.lib.pagesizes.A4),
}


@dataclasses.dataclass
class LayoutConfig:
	paper: str = DEFAULT_PAPER
	scale: float | None = None
	padding: float = DEFAULT_PADDING
	bottom: float = DEFAULT_BOTTOM
	between: float = DEFAULT_BETWEEN
	key_pages: tuple[int, ...] = DEFAULT_KEY_PAGES
	timeout: float = DEFAULT_TOOL_TIMEOUT
	max_workers: int = DEFAULT_MAX_WORKERS
	keep_intermediate: bool = False
	verbose: bool = False
	quiet: bool = False

