#!/usr/bin/env python
# -*-coding:utf8-*-

# progress.py: progress reporting for long computations
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

import logging
import sys
import threading

logger = logging.getLogger(__name__)


class Progress():
    """
    Progress of a staged computation, forwarded to an optional sink.

    The computation advances through stages. Within a stage, it announces a
    number of steps and reports them as they are done.

    Parameters
    ----------
    sink: object, optional
        Object with methods advance_stage(stage), set_progress_maximum(n) and
        progress(value), where value is the number of steps done in the
        current stage. Default is None: progress is only logged.
    """
    __slots__ = "sink", "stage", "maximum", "value", "_lock"

    def __init__(self, sink=None):
        self.sink = sink
        self.stage = 0
        self.maximum = 0
        self.value = 0
        self._lock = threading.Lock()

    def advance_stage(self):
        self.stage += 1
        self.maximum = 0
        self.value = 0
        logger.debug("stage %d", self.stage)
        if self.sink is not None:
            self.sink.advance_stage(self.stage)

    def set_progress_maximum(self, n):
        self.maximum = int(n)
        self.value = 0
        if self.sink is not None:
            self.sink.set_progress_maximum(self.maximum)

    def progress(self, amount=1):
        # called from worker threads
        with self._lock:
            self.value += amount
            if self.sink is not None:
                self.sink.progress(self.value)


class ConsoleSink():
    """
    Sink printing progress lines for a controlling process:
    STAGE, STEPS_IN_STAGE n and PROGRESS n.
    """

    def __init__(self, stream=None):
        self.stream = sys.stderr if stream is None else stream

    def advance_stage(self, stage):
        print("STAGE", file=self.stream, flush=True)

    def set_progress_maximum(self, n):
        print(f"STEPS_IN_STAGE {n}", file=self.stream, flush=True)

    def progress(self, value):
        print(f"PROGRESS {value}", file=self.stream, flush=True)
