#!/usr/bin/env python
# -*-coding:utf8-*-

# test_cli.py: tests of the command-line interface
# Copyright (C) 2023  Isaac Ren
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Tests for augarr/cli.py."""
import matplotlib
matplotlib.use("Agg")

import pytest

from augarr.cli import build_parser, main
from augarr.io import is_module_invariants_file, read_module_invariants

BOWTIE = """\
0 ; 0 0
1 ; 0 0
2 ; 0 1
0 1 ; 1 0
0 2 ; 0 1
1 2 ; 0 1
"""


def _bowtie_file(tmp_path):
    path = tmp_path / "bowtie.txt"
    path.write_text(BOWTIE)
    return str(path)


HOLLOW_TRIANGLE_FIREP = """\
--datatype firep
1 3 3
1 1 ; 0 1 2
0 0 ; 0 1
0 0 ; 1 2
0 0 ; 0 2
"""


def _firep_file(tmp_path):
    path = tmp_path / "triangle.firep"
    path.write_text(HOLLOW_TRIANGLE_FIREP)
    return str(path)


def _invariants_file(tmp_path):
    output = str(tmp_path / "bowtie.augarr")
    assert main([_bowtie_file(tmp_path), output]) == 0
    return output


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args(["input.txt"])
        assert args.output_file is None
        assert args.homology == 0
        assert args.num_threads == 0
        assert not args.koszul

    def test_binning_options(self):
        args = build_parser().parse_args(["input.txt", "-x", "3", "--ybins", "2", "--yreverse"])
        assert (args.xbins, args.ybins) == (3, 2)
        assert not args.xreverse
        assert args.yreverse

    def test_negative_bins(self, capsys):
        with pytest.raises(SystemExit):
            main(["input.txt", "-y", "-1"])
        assert "nonnegative" in capsys.readouterr().err

    def test_modes_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["input.txt", "--bounds", "--betti"])

    def test_invalid_parameters(self, capsys):
        with pytest.raises(SystemExit):
            main(["input.txt", "-H", "-1"])
        assert "nonnegative" in capsys.readouterr().err


class TestCompute:

    def test_writes_module_invariants(self, tmp_path):
        output = _invariants_file(tmp_path)
        assert is_module_invariants_file(output)

    def test_progress_on_stderr(self, tmp_path, capsys):
        output = str(tmp_path / "bowtie.augarr")
        assert main([_bowtie_file(tmp_path), output, "-V", "2"]) == 0
        err = capsys.readouterr().err
        assert err.splitlines().count("STAGE") == 3
        assert "STEPS_IN_STAGE 4" in err
        assert "PROGRESS 1" in err

    def test_betti(self, tmp_path, capsys):
        assert main([_bowtie_file(tmp_path), "--betti", "--koszul"]) == 0
        out = capsys.readouterr().out
        assert "Betti numbers:" in out
        assert "(1, 1, 1)" in out

    def test_minpres(self, tmp_path, capsys):
        assert main([_bowtie_file(tmp_path), "--minpres"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("x-grades\n")
        assert "MINIMAL PRESENTATION:" in out

    def test_save_figure(self, tmp_path):
        figure = tmp_path / "bowtie.png"
        assert main([_bowtie_file(tmp_path), "--save-fig", str(figure)]) == 0
        assert figure.stat().st_size > 0

    def test_save_minimal_presentation_figure(self, tmp_path):
        figure = tmp_path / "bowtie.png"
        assert main([_bowtie_file(tmp_path), "--minpres", "--save-fig", str(figure)]) == 0
        assert figure.stat().st_size > 0

    def test_module_invariants_keep_parameters(self, tmp_path):
        output = str(tmp_path / "bowtie.augarr")
        assert main([_bowtie_file(tmp_path), output, "-x", "2", "--num-threads", "2"]) == 0
        params = read_module_invariants(output).parameters
        assert params.input_file == _bowtie_file(tmp_path)
        assert (params.x_bins, params.num_threads) == (2, 2)

    def test_firep_input(self, tmp_path, capsys):
        assert main([_firep_file(tmp_path), "--betti", "-H", "1"]) == 0
        out = capsys.readouterr().out
        assert "xi_0:\n(0, 0, 1)\nxi_1:\n(1, 1, 1)\nxi_2:\n" in out

    def test_firep_input_cannot_be_reversed(self, tmp_path, capsys):
        assert main([_firep_file(tmp_path), "--xreverse"]) == 1
        assert "reversal" in capsys.readouterr().err


class TestQueries:

    def test_bounds(self, tmp_path, capsys):
        output = _invariants_file(tmp_path)
        capsys.readouterr()
        assert main([output, "--bounds"]) == 0
        assert capsys.readouterr().out == "low: 0, 0\nhigh: 1, 1\n"

    def test_barcodes(self, tmp_path, capsys):
        output = _invariants_file(tmp_path)
        lines = tmp_path / "lines.txt"
        lines.write_text("# angle offset\n0 0\n0 1.5\n")
        capsys.readouterr()
        assert main([output, "--barcodes", str(lines)]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["0 0: 0 inf x1, 0 1 x1", "0 1.5: 0 inf x1"]

    def test_query_file_prefixes(self, tmp_path, capsys):
        output = _invariants_file(tmp_path)
        lines = tmp_path / "lines.txt"
        lines.write_text("23 -0.22\n67 1.88\n10 0.92\n#100 0.92\n")
        capsys.readouterr()
        assert main([output, "--barcodes", str(lines)]) == 0
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 3
        for row, prefix in zip(out, ["23 -0.22:", "67 1.88:", "10 0.92:"]):
            assert row.startswith(prefix)

    def test_invalid_query_line(self, tmp_path, capsys):
        output = _invariants_file(tmp_path)
        lines = tmp_path / "lines.txt"
        lines.write_text("45 0\n100 0.92\n")
        capsys.readouterr()
        assert main([output, "--barcodes", str(lines)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("INPUT ERROR: line 2:")
        assert captured.err.rstrip().endswith(":END")

    def test_bounds_need_module_invariants(self, tmp_path, capsys):
        assert main([_bowtie_file(tmp_path), "--bounds"]) == 1
        assert "module invariants file" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.txt")]) == 1
