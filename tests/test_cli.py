"""Tests for the command-line interface."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from smartlinks.cli import build_config, create_parser, main
from smartlinks.core.rewriter import RewriteReport
from smartlinks.linkmate.transport import MalformedResponseError

PAGE = '<html><body><a href="http://a.com">A</a><a href="http://b.com">B</a></body></html>'


class FakeRewriter:
    """Rewrites every anchor pointing at http://a.com without touching the network."""

    instances: list = []

    def __init__(self, config, error=None):
        self.config = config
        self.error = error
        FakeRewriter.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return None

    async def rewrite_page(self, page):
        if self.error is not None:
            raise self.error
        report = RewriteReport(anchors_seen=len(page.anchors()), request_made=True)
        for anchor in page.anchors():
            if anchor.get_link_value() == "http://a.com":
                anchor.set_link_value("https://shop-links.co/A/?amp=true")
                report.rewritten.append(("http://a.com", "https://shop-links.co/A/?amp=true"))
        return report


@pytest.fixture
def page_file(tmp_path: Path) -> Path:
    path = tmp_path / "post.html"
    path.write_text(PAGE)
    return path


@pytest.fixture(autouse=True)
def _reset_fakes():
    FakeRewriter.instances = []


class TestBuildConfig:
    """Tests for merging CLI flags into config."""

    def test_flags(self, page_file):
        args = create_parser().parse_args(
            [
                str(page_file),
                "--url",
                "https://blog.example.com/post",
                "--publisher-id",
                "55",
                "--exclusive-links",
                "--link-attribute",
                "data-href",
                "--timeout",
                "3",
                "-v",
            ]
        )
        config = build_config(args)

        assert config.linkmate.publisher_id == "55"
        assert config.linkmate.exclusive_links is True
        assert config.linkmate.link_attribute == "data-href"
        assert config.network.timeout == 3.0
        assert config.log_level == "DEBUG"

    def test_flags_override_yaml(self, page_file, tmp_path):
        config_file = tmp_path / "smartlinks.yaml"
        config_file.write_text("linkmate:\n  publisher_id: 1\n  link_attribute: data-url\nnetwork:\n  timeout: 9\n")
        args = create_parser().parse_args(
            [str(page_file), "--url", "https://b.test/", "--config", str(config_file), "--publisher-id", "2"]
        )
        config = build_config(args)

        assert config.linkmate.publisher_id == "2"
        assert config.linkmate.link_attribute == "data-url"
        assert config.network.timeout == 9.0


class TestMain:
    """Tests for the main entry point."""

    def test_writes_rewritten_html_to_stdout(self, page_file, capsys):
        with patch("smartlinks.cli.SmartLinkRewriter", FakeRewriter):
            code = main([str(page_file), "--url", "https://blog.example.com/post", "--publisher-id", "9", "-q"])

        assert code == 0
        out = capsys.readouterr().out
        assert 'href="https://shop-links.co/A/?amp=true"' in out
        assert 'href="http://b.com"' in out
        assert FakeRewriter.instances[0].config.linkmate.publisher_id == "9"

    def test_output_file_and_json_report(self, page_file, tmp_path, capsys):
        output = tmp_path / "out.html"
        with patch("smartlinks.cli.SmartLinkRewriter", FakeRewriter):
            code = main(
                [
                    str(page_file),
                    "--url",
                    "https://blog.example.com/post",
                    "--publisher-id",
                    "9",
                    "-o",
                    str(output),
                    "--json",
                ]
            )

        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["rewritten"] == [{"original": "http://a.com", "replacement": "https://shop-links.co/A/?amp=true"}]
        assert "https://shop-links.co/A/?amp=true" in output.read_text()

    def test_missing_publisher_id(self, page_file):
        assert main([str(page_file), "--url", "https://blog.example.com/post", "-q"]) == 1

    def test_missing_page(self, tmp_path):
        missing = tmp_path / "nope.html"
        assert main([str(missing), "--url", "https://b.test/", "--publisher-id", "1", "-q"]) == 1

    def test_api_error_returns_1(self, page_file, capsys):
        def failing(config):
            return FakeRewriter(config, error=MalformedResponseError("bad shape"))

        with patch("smartlinks.cli.SmartLinkRewriter", failing):
            code = main([str(page_file), "--url", "https://b.test/", "--publisher-id", "1", "-q"])

        assert code == 1
        assert capsys.readouterr().out == ""

    def test_undecodable_page_returns_1(self, tmp_path, capsys):
        """Test that a page that is not UTF-8 fails cleanly."""
        page = tmp_path / "latin1.html"
        page.write_bytes(b"\xff\xfe<a href='http://a.com'>a</a>")

        code = main([str(page), "--url", "https://b.test/", "--publisher-id", "1", "-q"])

        assert code == 1
        assert "cannot read" in capsys.readouterr().err

    def test_oversized_response_returns_1(self, page_file, capsys):
        """Test that a response rejected by the size limit fails cleanly."""

        def failing(config):
            return FakeRewriter(config, error=ValueError("Content too large: 10000000 bytes"))

        with patch("smartlinks.cli.SmartLinkRewriter", failing):
            code = main([str(page_file), "--url", "https://b.test/", "--publisher-id", "1", "-q"])

        assert code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Content too large" in captured.err
