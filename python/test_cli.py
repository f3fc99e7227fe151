"""
Tests for the command line (codedoc.cli) and MCP tool (codedoc.server) entry points.

Run: python3 test_cli.py
From: python/
"""

import io
import json
import sys
import tempfile
from contextlib import redirect_stdout
from pathlib import Path

sys.path.insert(0, '.')

from docx import Document

from codedoc.cli import main
from codedoc.redline.editor import DocxEditor


def _write_docx(directory):
    doc = Document()
    doc.add_paragraph("Intro")
    doc.add_paragraph().add_run("<code> <conf> #lang=python #bogus </conf>").italic = True
    doc.add_paragraph("for i in range(3): pass")
    doc.add_paragraph().add_run("</code>").italic = True
    path = Path(directory) / "snippet.docx"
    doc.save(str(path))
    return path


def _run_cli(argv):
    buf = io.StringIO()
    with redirect_stdout(buf):
        main(argv)
    return buf.getvalue()


def test_instances_command():
    with tempfile.TemporaryDirectory() as tmp:
        out = _run_cli(["instances", str(_write_docx(tmp))])
    instances = json.loads(out)
    assert len(instances) == 1
    assert instances[0]["language"] == "python"
    assert instances[0]["code"] == "for i in range(3): pass\n"
    assert instances[0]["diagnostics"] == ["Unexpected config token: `#bogus`"]
    print("PASS: instances command prints JSON")


def test_highlight_command_writes_batch():
    with tempfile.TemporaryDirectory() as tmp:
        path = _write_docx(tmp)
        batch = Path(tmp) / "batch.json"
        _run_cli(["highlight", str(path), "-o", str(batch), "--theme", "github"])
        body = json.loads(batch.read_text(encoding="utf-8"))
    assert body["requests"]
    assert "updateTextStyle" in body["requests"][0]
    print("PASS: highlight command writes a batch file")


def test_highlight_command_applies_to_docx():
    with tempfile.TemporaryDirectory() as tmp:
        path = _write_docx(tmp)
        out = Path(tmp) / "out.docx"
        _run_cli(["highlight", str(path), "--apply", "-o", str(out)])
        styled = Document(str(out))
    runs = [r for p in styled.paragraphs for r in p.runs if r.text == "for"]
    assert runs and runs[0].font.name == "Courier New"
    assert DocxEditor(styled).text.startswith("Intro\n")
    print("PASS: highlight --apply edits the docx")


def test_missing_file_exits():
    try:
        _run_cli(["instances", "/nonexistent/codedoc.docx"])
    except SystemExit as e:
        assert e.code == 1
    else:
        raise AssertionError("expected SystemExit")
    print("PASS: missing input exits with status 1")


def test_server_tools():
    from codedoc.server import highlight_document, list_code_instances

    with tempfile.TemporaryDirectory() as tmp:
        path = _write_docx(tmp)
        listed = json.loads(list_code_instances(str(path)))
        assert listed[0]["language"] == "python"

        message = highlight_document(str(path))
        assert message.startswith("Wrote ")
        assert (Path(tmp) / "snippet.batch.json").exists()

    assert list_code_instances("/nonexistent.docx").startswith("Error")
    print("PASS: MCP tools list and highlight")


if __name__ == "__main__":
    tests = [
        test_instances_command,
        test_highlight_command_writes_batch,
        test_highlight_command_applies_to_docx,
        test_missing_file_exits,
        test_server_tools,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {test.__name__}: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print(f"\n{'='*60}")
    print(f"Results: {passed} passed, {failed} failed out of {len(tests)} tests")
    if failed == 0:
        print("ALL TESTS PASSED")
    else:
        print("SOME TESTS FAILED")
