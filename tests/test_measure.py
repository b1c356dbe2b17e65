import pytest

import conftest
import printlncs.errors
import printlncs.geometry
import printlncs.measure


Box = printlncs.geometry.Box
FakeTools = conftest.FakeTools

GS_BBOX_OUTPUT = (
	"%%BoundingBox: 71 695 158 709\n"
	"%%HiResBoundingBox: 71.982000 695.411979 157.661995 708.353978\n"
)


#============================================
def test_parse_prefers_hires_record() -> None:
	"""
	The high resolution record wins when both are present.
	"""
	box = printlncs.measure.parse_bounding_box(GS_BBOX_OUTPUT)
	assert box.coords() == pytest.approx((71.982, 695.411979, 157.661995, 708.353978))


#============================================
def test_parse_prefers_hires_regardless_of_order() -> None:
	text = "\n".join(reversed(GS_BBOX_OUTPUT.splitlines()))
	box = printlncs.measure.parse_bounding_box(text)
	assert box.left == pytest.approx(71.982)


#============================================
def test_parse_falls_back_to_integer_record() -> None:
	box = printlncs.measure.parse_bounding_box("GPL Ghostscript\n%%BoundingBox: 10 20 300 400\n")
	assert box.coords() == (10, 20, 300, 400)


#============================================
def test_parse_without_record_returns_none() -> None:
	assert printlncs.measure.parse_bounding_box("Error: /undefined in foo\n") is None
	assert printlncs.measure.parse_bounding_box("") is None


#============================================
def test_parse_inverted_record_returns_none() -> None:
	assert printlncs.measure.parse_bounding_box("%%BoundingBox: 300 20 10 400\n") is None


#============================================
def test_parse_page_count() -> None:
	"""
	An "(atend)" placeholder defers to the trailer value.
	"""
	assert printlncs.measure.parse_page_count("%!PS-Adobe-3.0\n%%Pages: 12\n") == 12
	assert printlncs.measure.parse_page_count("%%Pages: (atend)\n%%EOF\n%%Pages: 3\n") == 3


#============================================
def test_parse_page_count_missing() -> None:
	with pytest.raises(printlncs.errors.MeasurementFailure, match="doc.ps"):
		printlncs.measure.parse_page_count("%!PS-Adobe-3.0\n%%Pages: (atend)\n", "doc.ps")


#============================================
def test_parse_key_pages_forms() -> None:
	parse = printlncs.measure.parse_key_pages
	assert parse("3") == (3,)
	assert parse("1,2,5") == (1, 2, 5)
	assert parse("[1,2,3,4,5]") == (1, 2, 3, 4, 5)
	assert parse("1..4") == (1, 2, 3, 4)
	assert parse("(2..3)") == (2, 3)
	assert parse("2-4") == (2, 3, 4)


#============================================
def test_parse_key_pages_rejects_garbage() -> None:
	for text in ("", "a,b", "5..1", "0,1", "[]"):
		with pytest.raises(ValueError):
			printlncs.measure.parse_key_pages(text)


#============================================
def test_select_key_pages_boundary() -> None:
	"""
	Requested pages past the end are dropped, not an error.
	"""
	assert printlncs.measure.select_key_pages((1, 2, 3, 4, 5), 2) == [1, 2]
	assert printlncs.measure.select_key_pages((3, 1, 3), 4) == [3, 1]
	with pytest.raises(printlncs.errors.MeasurementFailure):
		printlncs.measure.select_key_pages((4, 5), 3)


#============================================
def test_measure_averages_existing_pages() -> None:
	tools = FakeTools(
		2,
		{
			1: Box.from_coords(0, 0, 100, 200),
			2: Box.from_coords(10, 10, 120, 220),
		},
	)
	box, pages = printlncs.measure.measure_content_box(tools, "doc.ps", (1, 2, 3, 4, 5))
	assert pages == [1, 2]
	assert sorted(tools.measured) == [1, 2]
	assert box.coords() == (5, 5, 110, 210)


#============================================
def test_measure_runs_pages_concurrently() -> None:
	"""
	Every sampled page is measured, possibly on several threads.
	"""
	boxes = {page: Box.from_coords(page, page, 100 + page, 200 + page) for page in range(1, 9)}
	tools = FakeTools(8, boxes)
	box, pages = printlncs.measure.measure_content_box(tools, "doc.ps", tuple(range(1, 9)), max_workers=4)
	assert sorted(tools.measured) == pages
	assert 1 <= len(tools.threads) <= 4
	assert box.left == pytest.approx(4.5)
	assert box.top == pytest.approx(204.5)


#============================================
def test_measure_failure_propagates() -> None:
	"""
	One unreadable page fails the whole measurement.
	"""
	boxes = {page: Box.from_coords(0, 0, 100, 100) for page in range(1, 4)}
	tools = FakeTools(3, boxes, fail_pages={2})
	with pytest.raises(printlncs.errors.MeasurementFailure, match="page 2"):
		printlncs.measure.measure_content_box(tools, "doc.ps", (1, 2, 3))


#============================================
def test_measure_with_no_existing_pages_fails() -> None:
	tools = FakeTools(1, {1: Box.from_coords(0, 0, 1, 1)})
	with pytest.raises(printlncs.errors.MeasurementFailure):
		printlncs.measure.measure_content_box(tools, "doc.ps", (2, 3))
	assert tools.measured == []
