# ABOUTME: End-to-end tests for the comicpub CLI.
# ABOUTME: Runs build and inspect through Click's CliRunner against real image folders.

from pathlib import Path

from click.testing import CliRunner

from comicpub.cli import cli
from tests.fixtures.images import make_page, make_spread, write_image


class TestCliBuild:
    """E2e tests for `comicpub build`."""

    def test_build_writes_default_output(self, comic_dir: Path) -> None:
        """Build writes <directory>.epub beside the directory."""
        runner = CliRunner()
        result = runner.invoke(cli, ["build", str(comic_dir), "--author", "Aiko Tanaka"])
        assert result.exit_code == 0, result.output
        expected = comic_dir.parent / "Moon Harbor.epub"
        assert expected.exists()
        assert "5 page(s), 1 spread(s), cover: yes" in result.output
        assert "Chapter 1" in result.output
        assert "Chapter 2" in result.output

    def test_build_reports_skipped_files(self, comic_dir: Path, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["build", str(comic_dir), "-o", str(tmp_path / "o.epub")])
        assert result.exit_code == 0
        assert "notes.txt" in result.output

    def test_build_quiet_prints_only_path(self, comic_dir: Path, tmp_path: Path) -> None:
        """Quiet mode prints the output path and nothing else."""
        output = tmp_path / "quiet.epub"
        runner = CliRunner()
        result = runner.invoke(cli, ["build", str(comic_dir), "-o", str(output), "-q"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(output)

    def test_build_bad_sequence_fails(self, tmp_path: Path) -> None:
        """A spread in a slot that cannot start a pair exits with code 1."""
        root = tmp_path / "bad"
        write_image(root / "01.png", make_page())
        write_image(root / "02.png", make_page())
        write_image(root / "03.png", make_spread())
        output = tmp_path / "bad.epub"
        runner = CliRunner()
        result = runner.invoke(cli, ["build", str(root), "-o", str(output)])
        assert result.exit_code == 1
        assert "Spread not allowed at page 3" in result.output
        assert not output.exists()

    def test_build_blank_title_fails(self, comic_dir: Path, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["build", str(comic_dir), "-o", str(tmp_path / "x.epub"), "--title", "  "]
        )
        assert result.exit_code == 1
        assert "title field cannot be empty" in result.output

    def test_build_invalid_meta_option(self, comic_dir: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["build", str(comic_dir), "--meta", "novalue"])
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_build_nonexistent_directory(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["build", "/nonexistent/comic"])
        assert result.exit_code != 0


class TestCliInspect:
    """E2e tests for `comicpub inspect`."""

    def test_inspect_built_book(self, comic_dir: Path, tmp_path: Path) -> None:
        output = tmp_path / "moon.epub"
        runner = CliRunner()
        build = runner.invoke(
            cli,
            ["build", str(comic_dir), "-o", str(output), "--rtl", "--publisher", "Lantern Press"],
        )
        assert build.exit_code == 0, build.output

        result = runner.invoke(cli, ["inspect", str(output)])
        assert result.exit_code == 0, result.output
        assert "Moon Harbor" in result.output
        assert "Lantern Press" in result.output
        assert "pre-paginated" in result.output
        assert "rtl" in result.output
        assert "Contents" in result.output
        assert "Chapter 2" in result.output

    def test_inspect_corrupt_file_reports_error(self, tmp_path: Path) -> None:
        corrupt = tmp_path / "corrupt.epub"
        corrupt.write_bytes(b"not a zip")
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", str(corrupt)])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestCliVersion:
    def test_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "version" in result.output
