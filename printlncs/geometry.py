"""
Point and box value types in PostScript points.

Coordinates follow the PostScript convention: origin at the bottom-left,
x increases rightward, y increases upward.
"""

# Standard Library
import dataclasses

# local repo modules
import printlncs as pl
import printlncs.config
import printlncs.errors


PAPER_SIZES = pl.config.PAPER_SIZES
DECIMALS = 6


@dataclasses.dataclass(frozen=True)
class Point:
	x: float
	y: float

	@classmethod
	def zero(cls) -> "Point":
		return cls(0.0, 0.0)

	def add(self, other: "Point") -> "Point":
		return Point(self.x + other.x, self.y + other.y)

	def scale(self, factor: float) -> "Point":
		return Point(self.x * factor, self.y * factor)

	def __str__(self) -> str:
		return f"({format_number(self.x)},{format_number(self.y)})"


@dataclasses.dataclass(frozen=True)
class Box:
	"""
	Rectangle given by its lower-left corner p1 and upper-right corner p2.
	"""

	p1: Point
	p2: Point

	def __post_init__(self) -> None:
		if self.p1.x > self.p2.x or self.p1.y > self.p2.y:
			raise ValueError(f"box corners out of order: {self.p1}:{self.p2}")

	@classmethod
	def zero(cls) -> "Box":
		return cls(Point.zero(), Point.zero())

	@classmethod
	def from_coords(cls, x1: float, y1: float, x2: float, y2: float) -> "Box":
		return cls(Point(x1, y1), Point(x2, y2))

	@property
	def left(self) -> float:
		return self.p1.x

	@property
	def bottom(self) -> float:
		return self.p1.y

	@property
	def right(self) -> float:
		return self.p2.x

	@property
	def top(self) -> float:
		return self.p2.y

	@property
	def width(self) -> float:
		return self.right - self.left

	@property
	def height(self) -> float:
		return self.top - self.bottom

	def coords(self) -> tuple[float, float, float, float]:
		return (self.left, self.bottom, self.right, self.top)

	def add(self, other: "Box") -> "Box":
		"""
		Add two boxes corner by corner.

		Args:
			other: Box to add.

		Returns:
			New Box.
		"""
		return Box(self.p1.add(other.p1), self.p2.add(other.p2))

	def scale(self, factor: float) -> "Box":
		"""
		Scale both corners by a non-negative factor.

		Args:
			factor: Scale factor.

		Returns:
			New Box.
		"""
		return Box(self.p1.scale(factor), self.p2.scale(factor))

	def __str__(self) -> str:
		return f"{self.p1}:{self.p2}"


#============================================
def format_number(value: float) -> str:
	"""
	Format a coordinate in fixed-point notation without trailing zeros.

	pstops does not read exponents, so tiny values print as "0".

	Args:
		value: Number to format.

	Returns:
		Text such as "612", "0.9525" or "-3.5".
	"""
	text = f"{float(value):.{DECIMALS}f}".rstrip("0").rstrip(".")
	if text in ("-0", ""):
		return "0"
	return text


#============================================
def average_boxes(boxes: list[Box]) -> Box:
	"""
	Average boxes component-wise.

	This is the mean of each corner coordinate, not the union of the boxes.

	Args:
		boxes: Boxes to average.

	Returns:
		Averaged Box.
	"""
	if not boxes:
		raise ValueError("cannot average an empty list of boxes")
	total = Box.zero()
	for box in boxes:
		total = total.add(box)
	return total.scale(1.0 / len(boxes))


#============================================
def paper_box(paper: str) -> Box:
	"""
	Look up the physical paper rectangle, anchored at the origin.

	Args:
		paper: Paper keyword, "letter" or "a4".

	Returns:
		Paper Box.
	"""
	size = PAPER_SIZES.get(paper)
	if size is None:
		raise pl.errors.PrintlncsError(f"unexpected paper size: {paper}")
	width, height = size
	return Box.from_coords(0, 0, width, height)
