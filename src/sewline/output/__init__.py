"""Output generation for production runs (PDF, text)."""

from sewline.output.pdf_generator import PDFGenerator
from sewline.output.text_report import TextReportGenerator

__all__ = [
    "PDFGenerator",
    "TextReportGenerator",
]
