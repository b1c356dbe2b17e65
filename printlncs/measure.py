"""
Content measurement: page counts, bounding boxes and their average.
"""

# Standard Library
import concurrent.futures
import re

# local repo modules
import printlncs as pl
import printlncs.config
import printlncs.errors
import printlncs.geometry


Box = pl.geometry.Box
MeasurementFailure = pl.errors.MeasurementFailure

DEFAULT_MAX_WORKERS = pl.config.DEFAULT_MAX_WORKERS

NUMBER = r"(-?\d+(?:\.\d*)?|-?\.\d+)"
PAGES_RE = re.compile(r"^%%Pages:\s*(\S+)")
BEGIN_DOCUMENT = "%%BeginDocument"
END_DOCUMENT = "%%EndDocument"
HIRES_BBOX_RE = re.compile(
	r"%%HiResBoundingBox:\s*" + r"\s+".join([NUMBER] * 4)
)
BBOX_RE = re.compile(r"%%BoundingBox:\s*" + r"\s+".join([NUMBER] * 4))
RANGE_RE = re.compile(r"^(\d+)\s*(?:\.\.|-)\s*(\d+)$")


#============================================
def parse_page_count(text: str, source: str = "document") -> int:
	"""
	Read the page count from DSC "%%Pages:" comments.

	Comments between %%BeginDocument and %%EndDocument belong to embedded
	files and are ignored. A numeric header value wins; under "(atend)"
	the last numeric entry, the trailer's, is used.

	Args:
		text: PostScript text.
		source: Name used in error messages.

	Returns:
		Declared page count.
	"""
	depth = 0
	values = []
	for line in text.splitlines():
		if line.startswith(BEGIN_DOCUMENT):
			depth += 1
		elif line.startswith(END_DOCUMENT):
			depth = max(0, depth - 1)
		elif depth == 0:
			match = PAGES_RE.match(line)
			if match:
				values.append(match.group(1))

	if values and values[0].isdigit() and int(values[0]) > 0:
		return int(values[0])
	for value in reversed(values[1:]):
		if value.isdigit() and int(value) > 0:
			return int(value)
	raise MeasurementFailure(f"expected page count in {source}")


#============================================
def parse_bounding_box(text: str) -> Box | None:
	"""
	Parse the box detector output, preferring the high resolution record.

	Args:
		text: Detector output.

	Returns:
		Box, or None when no record is present.
	"""
	match = HIRES_BBOX_RE.search(text)
	if match is None:
		match = BBOX_RE.search(text)
	if match is None:
		return None
	x1, y1, x2, y2 = (float(value) for value in match.groups())
	try:
		return Box.from_coords(x1, y1, x2, y2)
	except ValueError:
		return None


#============================================
def parse_key_pages(text: str) -> tuple[int, ...]:
	"""
	Parse a page list.

	Accepted forms: "3", "1,2,5", "[1,2,5]", "1..5", "(1..5)", "1-5".

	Args:
		text: Page list text.

	Returns:
		Tuple of 1-based page numbers.
	"""
	stripped = text.strip().strip("[]()").strip()
	if not stripped:
		raise ValueError(f"empty page list: {text!r}")

	match = RANGE_RE.match(stripped)
	if match:
		start, end = int(match.group(1)), int(match.group(2))
		if start > end:
			raise ValueError(f"page range runs backwards: {text!r}")
		pages = tuple(range(start, end + 1))
	else:
		try:
			pages = tuple(int(item) for item in stripped.split(","))
		except ValueError:
			raise ValueError(f"I don't know how to treat the range {text!r}") from None

	if any(page < 1 for page in pages):
		raise ValueError(f"page numbers start at 1: {text!r}")
	return pages


#============================================
def select_key_pages(key_pages: tuple[int, ...], page_count: int, source: str = "document") -> list[int]:
	"""
	Keep the requested pages that exist in the document.

	Args:
		key_pages: Requested page numbers.
		page_count: Pages in the document.
		source: Name used in error messages.

	Returns:
		Existing pages in request order, without duplicates.
	"""
	pages = []
	for page in key_pages:
		if page <= page_count and page not in pages:
			pages.append(page)
	if not pages:
		raise MeasurementFailure(
			f"none of the key pages {list(key_pages)} exist in {source} ({page_count} pages)"
		)
	return pages


#============================================
def measure_content_box(
	collaborator,
	ps_path: str,
	key_pages: tuple[int, ...],
	max_workers: int = DEFAULT_MAX_WORKERS,
) -> tuple[Box, list[int]]:
	"""
	Measure the sampled pages concurrently and average their boxes.

	Args:
		collaborator: Object providing page_count(path) and measure_page(path, page).
		ps_path: PostScript document path.
		key_pages: Candidate pages to sample.
		max_workers: Upper bound on concurrent detector runs.

	Returns:
		Tuple of (averaged box, measured pages).
	"""
	page_count = collaborator.page_count(ps_path)
	pages = select_key_pages(key_pages, page_count, ps_path)

	workers = max(1, min(max_workers, len(pages)))
	with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
		futures = {page: executor.submit(collaborator.measure_page, ps_path, page) for page in pages}
		try:
			boxes = [futures[page].result() for page in pages]
		except BaseException:
			for future in futures.values():
				future.cancel()
			raise

	return (pl.geometry.average_boxes(boxes), pages)
