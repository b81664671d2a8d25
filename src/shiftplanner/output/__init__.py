"""Output generation for plannings (PDF, text)."""

from shiftplanner.output.pdf_generator import PDFGenerator
from shiftplanner.output.report_generator import ReportGenerator

__all__ = [
    "PDFGenerator",
    "ReportGenerator",
]
