from io import BytesIO
from docx import Document
from fastapi.testclient import TestClient
from cv_autofill.core.docx_extractor import extract_docx_text
from cv_autofill.main import app

client = TestClient(app)

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

PARAGRAPHS = [
    "John Doe",
    "john.doe@email.com",
    "(555) 123-4567",
    "EXPERIENCE",
    "Senior Engineer at Tech Corp",
    "Jan 2020 - Present",
    "• Led a team of 5",
    "EDUCATION",
    "Bachelor of Science, State University",
    "2018",
    "SKILLS",
    "JavaScript, Python, React",
]


def _docx_bytes(paragraphs, table_rows=None):
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table_rows:
        table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for i, row in enumerate(table_rows):
            for j, value in enumerate(row):
                table.cell(i, j).text = value
    buf = BytesIO()
    doc.save(buf)
    return buf.getvalue()


def test_parse_docx_extracts_profile():
    files = {"file": ("resume.docx", _docx_bytes(PARAGRAPHS), DOCX_TYPE)}
    r = client.post("/parse", files=files)
    assert r.status_code == 200
    data = r.json()

    assert data["profile"]["personal_info"]["email"] == "john.doe@email.com"
    assert data["profile"]["work_experience"][0]["company"] == "Tech Corp"
    assert data["profile"]["education"][0]["degree"] == "Bachelor of Science"
    assert "Python" in data["profile"]["skills"]
    assert data["extraction"]["extraction_method"] == "python-docx"
    assert data["warnings"] == []


def test_docx_tables_produce_warning():
    files = {"file": ("resume.docx", _docx_bytes(PARAGRAPHS, [["Docker", "Kubernetes"]]), DOCX_TYPE)}
    r = client.post("/parse", files=files)
    assert r.status_code == 200
    data = r.json()
    assert any(w.startswith("Document contains 1 table(s)") for w in data["warnings"])
    assert "Kubernetes" in data["profile"]["skills"]


def test_corrupted_docx():
    files = {"file": ("resume.docx", b"this is not a zip archive", DOCX_TYPE)}
    r = client.post("/parse", files=files)
    assert r.status_code == 422
    assert r.json()["code"] == "CORRUPTED_FILE"


# ===== EXTRACTOR TESTS =====


def test_extract_docx_text_paragraphs_then_tables():
    result = extract_docx_text(_docx_bytes(["Jane Doe", "", "jane@example.com"], [["Python", "SQL"]]))
    assert result.text == "Jane Doe\njane@example.com\nPython | SQL"
    assert result.file_type == "docx"
    assert result.word_count == 6


def test_extract_docx_text_without_paragraphs():
    result = extract_docx_text(_docx_bytes([], [["Jane Doe", "jane@example.com"]]))
    assert result.text == "Jane Doe | jane@example.com"
    assert "Document has no text paragraphs" in result.warnings
