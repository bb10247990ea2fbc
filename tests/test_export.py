import sys
import unittest
from io import BytesIO
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docx import Document  # noqa: E402
from docx.shared import Pt  # noqa: E402
from pypdf import PdfReader  # noqa: E402

from app.services.export_service import (  # noqa: E402
    download_filename,
    export_resume,
    is_header_line,
    render_docx,
    render_rtf,
)

RESUME = "JANE DOE\nProfessional Summary\nBackend engineer with 5 years of Python.\n\nWork EXPERIENCE\nBuilt <fast> APIs & services."


class HeaderLineTests(unittest.TestCase):
    def test_upper_case_and_marker_lines(self):
        self.assertTrue(is_header_line("JANE DOE"))
        self.assertTrue(is_header_line("Technical SKILLS"))
        self.assertFalse(is_header_line("Backend engineer with 5 years of Python."))
        self.assertFalse(is_header_line(""))
        self.assertFalse(is_header_line("2019 - 2024"))
        self.assertFalse(is_header_line("EXPERIENCE " * 10))


class ExportTests(unittest.TestCase):
    def test_pdf_export(self):
        content = export_resume(RESUME, "pdf")
        self.assertTrue(content.startswith(b"%PDF-"))

        text = "\n".join(page.extract_text() or "" for page in PdfReader(BytesIO(content)).pages)
        self.assertIn("JANE DOE", text)
        self.assertIn("Built <fast> APIs & services.", text)

    def test_docx_export_formats_headers(self):
        document = Document(BytesIO(render_docx(RESUME)))
        paragraphs = document.paragraphs
        self.assertEqual([p.text for p in paragraphs], RESUME.split("\n"))

        header_run = paragraphs[0].runs[0]
        self.assertTrue(header_run.bold)
        self.assertEqual(header_run.font.size, Pt(14))

        body_run = paragraphs[2].runs[0]
        self.assertFalse(body_run.bold)
        self.assertEqual(body_run.font.size, Pt(12))

    def test_rtf_export(self):
        content = render_rtf("Skills {core} \\ café\nSecond line")
        self.assertTrue(content.startswith(b"{\\rtf1"))
        self.assertTrue(content.endswith(b"}"))
        self.assertIn(b"Skills \\{core\\} \\\\ caf\\u233?", content)
        self.assertIn(b"\\par Second line", content)

    def test_rtf_encodes_astral_characters_as_surrogates(self):
        content = render_rtf("Rocket \U0001F680")
        self.assertIn(b"\\u-10179?\\u-8576?", content)

    def test_unsupported_format(self):
        with self.assertRaises(ValueError):
            export_resume(RESUME, "odt")


class DownloadFilenameTests(unittest.TestCase):
    def test_default_name(self):
        self.assertEqual(download_filename(None, "pdf"), "improved_resume.pdf")
        self.assertEqual(download_filename("   ", "rtf"), "improved_resume.rtf")

    def test_strips_duplicate_extension_and_unsafe_characters(self):
        self.assertEqual(download_filename("jane_cv.docx", "docx"), "jane_cv.docx")
        self.assertEqual(download_filename('../evil"name', "pdf"), "evilname.pdf")


if __name__ == "__main__":
    unittest.main()
