"""
Pytest configuration for local imports and shared fakes.
"""

# Standard Library
import math
import os
import shutil
import sys
import threading

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()
import pytest
import reportlab.lib.pagesizes
import reportlab.pdfgen.canvas

import printlncs.errors
import printlncs.geometry


Box = printlncs.geometry.Box


#============================================
def write_sample_pdf(path: str, pages: int) -> str:
	"""
	Write a PDF with one line of text per page.

	Args:
		path: Output path.
		pages: Number of pages.

	Returns:
		The path.
	"""
	pdf = reportlab.pdfgen.canvas.Canvas(path, pagesize=reportlab.lib.pagesizes.letter)
	for index in range(pages):
		pdf.drawString(72, 700, f"Sample page {index + 1}")
		pdf.showPage()
	pdf.save()
	return path


class FakeTools:
	"""
	Collaborator that records calls instead of running external tools.
	"""

	def __init__(self, page_count: int, boxes: dict, fail_pages: set | None = None):
		self.pages = page_count
		self.boxes = boxes
		self.fail_pages = fail_pages or set()
		self.measured = []
		self.converted = []
		self.expressions = []
		self.threads = set()
		self.lock = threading.Lock()

	def page_count(self, ps_path: str) -> int:
		return self.pages

	def measure_page(self, ps_path: str, page: int) -> Box:
		with self.lock:
			self.measured.append(page)
			self.threads.add(threading.get_ident())
		if page in self.fail_pages:
			raise printlncs.errors.MeasurementFailure(f"expected bounding box data for page {page} of {ps_path}")
		return self.boxes[page]

	def convert(self, path: str, target_ext: str, dest: str) -> str:
		if os.path.splitext(path)[1] == target_ext:
			return path
		self.converted.append((os.path.basename(path), target_ext))
		if target_ext == ".pdf":
			write_sample_pdf(dest, math.ceil(self.pages / 2))
		else:
			shutil.copyfile(path, dest)
		return dest

	def impose(self, ps_path: str, expression: str, paper: str, dest: str) -> str:
		self.expressions.append((expression, paper))
		shutil.copyfile(ps_path, dest)
		return dest


#============================================
@pytest.fixture
def sample_pdf(tmp_path) -> str:
	"""
	Two-page sample PDF.
	"""
	return write_sample_pdf(str(tmp_path / "paper.pdf"), 2)
