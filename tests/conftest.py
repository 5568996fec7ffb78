import pytest

from tests.helpers import REPORT_PAGE, build_pdf


@pytest.fixture
def report_pdf_bytes() -> bytes:
    return build_pdf([REPORT_PAGE])


@pytest.fixture
def report_pdf_path(tmp_path, report_pdf_bytes):
    pdf_path = tmp_path / "report.pdf"
    pdf_path.write_bytes(report_pdf_bytes)
    return pdf_path
