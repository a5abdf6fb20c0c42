"""
Tests for the command line interface.
"""

import json

import pytest

from cp_flowpipe.cli import create_parser, main


@pytest.fixture
def flowpipe_file(tmp_path, flowpipe_yaml):
    path = tmp_path / "flowpipe.yaml"
    path.write_text(flowpipe_yaml)
    return str(path)


@pytest.fixture
def hybrid_file(tmp_path, hybrid_yaml):
    path = tmp_path / "hybrid.yaml"
    path.write_text(hybrid_yaml)
    return str(path)


class TestParser:
    """Tests for the argument parser."""

    def test_query_arguments(self):
        """Test query options are parsed with their types."""
        args = create_parser().parse_args(
            ["query", "fp.yaml", "-t", "1.5", "--interval", "0", "2", "--vars", "0", "1"]
        )

        assert args.command == "query"
        assert args.time == 1.5
        assert args.interval == [0.0, 2.0]
        assert args.vars == [0, 1]
        assert args.shift is None

    def test_plot_defaults(self):
        """Test plot defaults to the first two variables."""
        args = create_parser().parse_args(["plot", "fp.yaml"])

        assert args.vars == [1, 2]
        assert args.output == "flowpipe.png"


class TestInfo:
    """Tests for the info command."""

    def test_info(self, flowpipe_file, capsys):
        """Test the summary of a flowpipe."""
        assert main(["info", flowpipe_file]) == 0

        out = capsys.readouterr().out
        assert "Type: Flowpipe" in out
        assert "Reach-sets: 3" in out
        assert "Time span: [0.0, 3.0]" in out
        assert "Set representation: Hyperrectangle" in out
        assert "algorithm: test" in out

    def test_info_hybrid(self, hybrid_file, capsys):
        """Test the summary lists the locations of a hybrid flowpipe."""
        assert main(["--verbose", "info", hybrid_file]) == 0

        out = capsys.readouterr().out
        assert "Type: MixedHybridFlowpipe" in out
        assert "0: 1 reach-sets of Zonotope" in out
        assert "1: 1 reach-sets of Hyperrectangle" in out

    def test_missing_file(self, tmp_path, capsys):
        """Test a missing file is reported with exit code 1."""
        assert main(["info", str(tmp_path / "missing.yaml")]) == 1
        assert "not found" in capsys.readouterr().err


class TestQuery:
    """Tests for the query command."""

    def test_query_section(self, flowpipe_file, capsys):
        """Test the query section of the flowpipe file is evaluated."""
        assert main(["query", flowpipe_file]) == 0

        result = json.loads(capsys.readouterr().out)
        assert result["time"]["positions"] == [0, 1]
        assert result["interval"]["positions"] == [0, 1, 2]

    def test_command_line_overrides(self, flowpipe_file, capsys):
        """Test command line values take precedence over the query section."""
        code = main([
            "query", flowpipe_file,
            "--shift", "1", "--time", "2.5", "--interval", "1.5", "3.5",
            "--direction", "1", "0",
        ])
        assert code == 0

        result = json.loads(capsys.readouterr().out)
        assert result["tspan"] == [1.0, 4.0]
        assert result["time"]["positions"] == [1]
        assert result["interval"]["positions"] == [0, 1, 2]
        assert result["support_function"] == pytest.approx(3.0)

    def test_separate_query_file(self, tmp_path, flowpipe_file, capsys):
        """Test queries read from their own file."""
        query = tmp_path / "query.yaml"
        query.write_text("query:\n  vars: [2]\n")

        assert main(["query", flowpipe_file, "--query", str(query)]) == 0

        result = json.loads(capsys.readouterr().out)
        assert result["projection"]["high"] == pytest.approx([3.0])
        assert "time" not in result

    def test_time_out_of_range(self, flowpipe_file, capsys):
        """Test an uncovered time is reported with exit code 1."""
        assert main(["query", flowpipe_file, "--time", "5"]) == 1
        assert "does not belong" in capsys.readouterr().err


class TestPlot:
    """Tests for the plot command."""

    def test_plot(self, tmp_path, flowpipe_file):
        """Test the projection is written to an image file."""
        output = tmp_path / "flowpipe.png"

        assert main(["plot", flowpipe_file, "-o", str(output)]) == 0
        assert output.exists()

    def test_plot_time(self, tmp_path, hybrid_file):
        """Test plotting against time."""
        output = tmp_path / "time.png"

        assert main(["plot", hybrid_file, "--vars", "0", "1", "-o", str(output)]) == 0
        assert output.exists()

    def test_plot_invalid_vars(self, tmp_path, flowpipe_file, capsys):
        """Test out-of-range variables are reported with exit code 1."""
        output = tmp_path / "bad.png"

        assert main(["plot", flowpipe_file, "--vars", "1", "3", "-o", str(output)]) == 1
        assert "out of range" in capsys.readouterr().err


def test_no_command(capsys):
    """Test running without a command prints the help."""
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out
