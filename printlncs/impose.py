"""
Imposition geometry for two rotated pages per sheet.

Each source page is rotated 90 degrees onto the sheet, so the source
height runs along the sheet width and two source widths stack along the
sheet height.
"""

# Standard Library
import dataclasses

# local repo modules
import printlncs as pl
import printlncs.config
import printlncs.errors
import printlncs.geometry


Point = pl.geometry.Point
Box = pl.geometry.Box
LayoutConfig = pl.config.LayoutConfig


@dataclasses.dataclass(frozen=True)
class Transform:
	scale: float
	shift1: Point
	shift2: Point
	horizontal_margin: float
	vertical_margin: float
	paper_box: Box
	content_box: Box
	automatic: bool

	@property
	def shrinks(self) -> bool:
		return self.automatic and self.scale < 1.0


#============================================
def check_content_box(content_box: Box) -> None:
	"""
	Reject content boxes that cannot be fitted.

	Args:
		content_box: Averaged content box.
	"""
	if content_box.width <= 0 or content_box.height <= 0:
		raise pl.errors.DegenerateGeometry(
			f"degenerate content box {content_box}: "
			f"width {content_box.width:g}, height {content_box.height:g}"
		)


#============================================
def compute_scale(content_box: Box, paper_box: Box, padding: float) -> float:
	"""
	Compute the largest uniform scale that fits two rotated pages on a sheet.

	The rotated page height has to fit the sheet width with a padding on
	either side. Two rotated page widths have to fit the sheet height with
	padding above, below and between them. The result never exceeds 1.

	Args:
		content_box: Averaged content box.
		paper_box: Physical paper box.
		padding: Padding in points.

	Returns:
		Scale factor.
	"""
	check_content_box(content_box)
	width_fit = (paper_box.width - 2 * padding) / content_box.height
	height_fit = (paper_box.height - 3 * padding) / (2 * content_box.width)
	return min(1.0, width_fit, height_fit)


#============================================
def compute_transform(content_box: Box, config: LayoutConfig) -> Transform:
	"""
	Derive the scale and the shift of each sub-page.

	Args:
		content_box: Averaged content box.
		config: Layout configuration.

	Returns:
		Transform.
	"""
	check_content_box(content_box)
	paper_box = pl.geometry.paper_box(config.paper)

	automatic = config.scale is None
	if automatic:
		scale = compute_scale(content_box, paper_box, config.padding)
	else:
		scale = config.scale
		if scale <= 0:
			raise pl.errors.PrintlncsError(f"scale factor must be positive, got {scale:g}")

	horizontal_margin = (paper_box.width - content_box.height * scale) / 2
	vertical_margin = (paper_box.height - 2 * content_box.width * scale) / 3

	shift1 = Point(
		horizontal_margin + content_box.top * scale - config.bottom,
		vertical_margin - content_box.left * scale - config.between,
	)
	shift2 = Point(
		shift1.x,
		shift1.y + vertical_margin + content_box.width * scale + 2 * config.between,
	)

	return Transform(
		scale=scale,
		shift1=shift1,
		shift2=shift2,
		horizontal_margin=horizontal_margin,
		vertical_margin=vertical_margin,
		paper_box=paper_box,
		content_box=content_box,
		automatic=automatic,
	)


#============================================
def format_expression(transform: Transform) -> str:
	"""
	Serialize a transform as a pstops page specification.

	Args:
		transform: Computed transform.

	Returns:
		Expression such as "2:0L@0.9(10,20)+1L@0.9(10,400)".
	"""
	scale = pl.geometry.format_number(transform.scale)
	return f"2:0L@{scale}{transform.shift1}+1L@{scale}{transform.shift2}"


#============================================
def describe_transform(transform: Transform) -> list[str]:
	"""
	Build the verbose report lines for a transform.

	Args:
		transform: Computed transform.

	Returns:
		List of lines.
	"""
	return [
		f"paper box: {transform.paper_box}",
		f"bounding box: {transform.content_box}",
		f"scaling: {pl.geometry.format_number(transform.scale)}",
		f"horizontal margin: {transform.horizontal_margin:.2f}",
		f"vertical margin: {transform.vertical_margin:.2f}",
		f"left-page shift: {transform.shift1}",
		f"right-page shift: {transform.shift2}",
	]
