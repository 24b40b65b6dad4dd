#!/usr/bin/env python
# -*-coding:utf8-*-

# test_config.py: tests of parameters, logging and progress reporting
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
"""Tests for augarr/config.py, augarr/logging_config.py and augarr/progress.py."""
from concurrent.futures import ThreadPoolExecutor
import io
import logging

import pytest

from augarr.config import InputParameters
from augarr.errors import InputError
from augarr.logging_config import setup_logging, verbosity_level
from augarr.progress import ConsoleSink, Progress


class TestInputParameters:

    def test_defaults(self):
        params = InputParameters(input_file="in.txt")
        assert params.hom_degree == 0
        assert params.log_level == logging.WARNING

    @pytest.mark.parametrize("kwargs", [
        {"hom_degree": -1},
        {"num_threads": -2},
        {"x_bins": -1},
        {"y_bins": -3},
        {"verbosity": 11},
        {"minpres": True, "koszul": True},
        {"betti": True, "bounds": True},
        {"bounds": True, "barcodes_file": "lines.txt"},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(InputError):
            InputParameters(input_file="in.txt", **kwargs)

    def test_dict_round_trip(self):
        params = InputParameters(input_file="in.txt", hom_degree=1, verbosity=7, x_label="time",
                                 x_bins=5, y_reverse=True)
        data = params.to_dict()
        data["unknown"] = 1
        assert InputParameters.from_dict(data) == params


class TestLogging:

    @pytest.mark.parametrize("verbosity, level", [
        (0, logging.WARNING), (1, logging.INFO), (5, logging.INFO), (6, logging.DEBUG), (10, logging.DEBUG),
    ])
    def test_verbosity_level(self, verbosity, level):
        assert verbosity_level(verbosity) == level

    def test_setup_twice_keeps_one_console_handler(self):
        setup_logging(logging.INFO)
        logger = setup_logging(logging.DEBUG)
        assert logger.name == "augarr"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        path = tmp_path / "augarr.log"
        logger = setup_logging(logging.INFO, log_file=str(path))
        logging.getLogger("augarr.arrangement").info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "augarr.arrangement - INFO - hello" in path.read_text()
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()


class TestProgress:

    def test_console_sink(self):
        stream = io.StringIO()
        progress = Progress(ConsoleSink(stream))
        progress.advance_stage()
        progress.set_progress_maximum(3)
        progress.progress()
        progress.progress(2)
        assert stream.getvalue().splitlines() == ["STAGE", "STEPS_IN_STAGE 3", "PROGRESS 1", "PROGRESS 3"]

    def test_new_stage_resets_counters(self):
        progress = Progress()
        progress.set_progress_maximum(4)
        progress.progress(4)
        progress.advance_stage()
        assert (progress.stage, progress.maximum, progress.value) == (1, 0, 0)

    def test_threads(self):
        progress = Progress()
        progress.set_progress_maximum(1000)
        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(lambda _: progress.progress(), range(1000)))
        assert progress.value == 1000
