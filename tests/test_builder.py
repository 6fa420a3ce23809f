"""Tests for the batch site builder."""

import json

import pytest

import builder
from builder import build_all, build_single, main, resume_urls
from document import DocumentParseError
from pdf_renderer import PDFRenderError


def write(path, data):
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


@pytest.fixture
def resumes(tmp_path, sample):
    d = tmp_path / "resumes"
    d.mkdir()
    write(d / "Richard Hendriks CV.json", sample)
    return d


@pytest.fixture
def dist(tmp_path):
    return tmp_path / "dist"


class FakePDF:
    def __init__(self, fail_for=()):
        self.fail_for = fail_for
        self.rendered = []

    def render(self, html):
        self.rendered.append(html)
        if any(name in html for name in self.fail_for):
            raise PDFRenderError("429 forever")
        return b"%PDF-fake"


class TestBuildAll:
    def test_builds_json_and_html(self, resumes, dist, tmp_path):
        tmp_dir = tmp_path / "tmp"
        report = build_all(resumes, dist, tmp_dir=tmp_dir)
        assert report.built == ["Richard Hendriks CV.json"]
        out = dist / "resume"
        assert json.loads((out / "Richard Hendriks CV.json").read_text(encoding="utf-8"))["meta"]["name"] == "Richard Hendriks CV"
        assert "<title>Richard Hendriks</title>" in (out / "Richard Hendriks CV.html").read_text(encoding="utf-8")
        assert not tmp_dir.exists()

    def test_skips_resume_without_meta_name(self, resumes, dist, tmp_path, sample):
        sample["meta"].pop("name")
        write(resumes / "anonymous.json", sample)
        report = build_all(resumes, dist, tmp_dir=tmp_path / "tmp")
        assert report.skipped == ["anonymous.json"]
        assert not (dist / "resume" / "anonymous.json").exists()
        assert report.built == ["Richard Hendriks CV.json"]

    def test_unreadable_resume_fails_alone(self, resumes, dist, tmp_path):
        write(resumes / "broken.json", "{nope")
        report = build_all(resumes, dist, tmp_dir=tmp_path / "tmp")
        assert report.failed == ["broken.json"]
        assert report.built == ["Richard Hendriks CV.json"]

    def test_missing_html_artifact_is_skipped(self, resumes, dist, tmp_path):
        def no_output(data, out_dir, **kwargs):
            out_dir.mkdir(parents=True, exist_ok=True)

        report = build_all(resumes, dist, tmp_dir=tmp_path / "tmp", bundler=no_output)
        assert report.skipped == ["Richard Hendriks CV.json"]
        assert (dist / "resume" / "Richard Hendriks CV.json").exists()
        assert not (dist / "resume" / "Richard Hendriks CV.html").exists()

    def test_bundler_error_fails_one(self, resumes, dist, tmp_path):
        def explode(data, out_dir, **kwargs):
            raise RuntimeError("bundler crashed")

        report = build_all(resumes, dist, tmp_dir=tmp_path / "tmp", bundler=explode)
        assert report.failed == ["Richard Hendriks CV.json"]

    def test_writes_pdf(self, resumes, dist, tmp_path):
        pdf = FakePDF()
        report = build_all(resumes, dist, tmp_dir=tmp_path / "tmp", pdf_renderer=pdf)
        assert report.built == ["Richard Hendriks CV.json"]
        assert (dist / "resume" / "Richard Hendriks CV.pdf").read_bytes() == b"%PDF-fake"
        assert len(pdf.rendered) == 1

    def test_pdf_failure_does_not_stop_batch(self, resumes, dist, tmp_path, sample):
        other = json.loads(json.dumps(sample))
        other["basics"]["name"] = "Gilfoyle"
        other["meta"]["name"] = "Gilfoyle CV"
        write(resumes / "Gilfoyle CV.json", other)

        report = build_all(resumes, dist, tmp_dir=tmp_path / "tmp",
                           pdf_renderer=FakePDF(fail_for=("<title>Gilfoyle</title>",)))
        assert report.failed == ["Gilfoyle CV.json"]
        assert report.built == ["Richard Hendriks CV.json"]
        assert (dist / "resume" / "Gilfoyle CV.html").exists()
        assert not (dist / "resume" / "Gilfoyle CV.pdf").exists()
        assert (dist / "resume" / "Richard Hendriks CV.pdf").exists()

    def test_primary_color_applied(self, resumes, dist, tmp_path):
        build_all(resumes, dist, tmp_dir=tmp_path / "tmp", primary_color="#0a0b0c")
        assert "#0a0b0c" in (dist / "resume" / "Richard Hendriks CV.html").read_text(encoding="utf-8")

    def test_missing_resumes_dir(self, tmp_path, dist):
        with pytest.raises(FileNotFoundError):
            build_all(tmp_path / "nowhere", dist)

    def test_empty_resumes_dir(self, tmp_path, dist):
        (tmp_path / "empty").mkdir()
        report = build_all(tmp_path / "empty", dist, tmp_dir=tmp_path / "tmp")
        assert (report.built, report.skipped, report.failed) == ([], [], [])


class TestResumeUrls:
    def test_versioned_files_excluded(self, resumes, sample):
        write(resumes / "Richard Hendriks CV.2024-05-01T10-20-30.json", sample)
        urls = resume_urls(resumes, "cv.example.com")
        assert urls == [{
            "name": "Richard Hendriks CV",
            "json": "https://cv.example.com/resume/Richard Hendriks CV.json",
            "html": "https://cv.example.com/resume/Richard Hendriks CV.html",
        }]


class TestMain:
    def test_missing_dir_exit_code(self, tmp_path):
        assert main(["--resumes-dir", str(tmp_path / "nowhere"), "--out-dir", str(tmp_path / "dist"),
                     "--pdf", "none"]) == 1

    def test_success_exit_code(self, resumes, dist, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        assert main(["--resumes-dir", str(resumes), "--out-dir", str(dist), "--pdf", "none"]) == 0
        assert (dist / "resume" / "Richard Hendriks CV.html").exists()


class TestBuildSingle:
    def test_builds_index_html(self, tmp_path, sample):
        data = write(tmp_path / "cv.json", sample)
        out = tmp_path / "site"
        built = build_single(data, out, theme="classic")
        assert built == out / "index.html"
        assert "<title>Richard Hendriks</title>" in built.read_text(encoding="utf-8")
        assert not (out / "index.pdf").exists()

    def test_writes_pdf(self, tmp_path, sample):
        out = tmp_path / "site"
        build_single(write(tmp_path / "cv.json", sample), out, pdf_renderer=FakePDF())
        assert (out / "index.pdf").read_bytes() == b"%PDF-fake"

    def test_invalid_document(self, tmp_path):
        with pytest.raises(DocumentParseError):
            build_single(write(tmp_path / "cv.json", "[1, 2]"), tmp_path / "site")

    def test_missing_artifact(self, tmp_path, sample):
        with pytest.raises(FileNotFoundError):
            build_single(write(tmp_path / "cv.json", sample), tmp_path / "site",
                         bundler=lambda *a, **k: None)

    def test_main_uses_data_filename(self, tmp_path, sample, monkeypatch):
        data = write(tmp_path / "cv.json", sample)
        monkeypatch.setattr(builder.config, "DATA_FILENAME", str(data))
        out = tmp_path / "site"
        assert main(["--data", "--out-dir", str(out), "--pdf", "none"]) == 0
        assert (out / "index.html").exists()

    def test_main_explicit_file(self, tmp_path, sample):
        data = write(tmp_path / "other.json", sample)
        out = tmp_path / "site"
        assert main(["--data", str(data), "--out-dir", str(out), "--pdf", "none"]) == 0
        assert (out / "index.html").exists()

    def test_main_missing_file(self, tmp_path):
        assert main(["--data", str(tmp_path / "nope.json"), "--out-dir", str(tmp_path / "site"),
                     "--pdf", "none"]) == 1
