#!/usr/bin/env python
# -*-coding:utf8-*-

# logging_config.py: logging setup for the console front end
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


def verbosity_level(verbosity):
    """
    Logging level of a console verbosity between 0 and 10: warnings only at
    0, information up to 5 and debugging messages above.
    """
    if verbosity <= 0:
        return logging.WARNING
    if verbosity <= 5:
        return logging.INFO
    return logging.DEBUG


def setup_logging(level=logging.WARNING, log_file=None):
    """
    Configure the logger of the augarr package.

    Messages go to stderr, so that they do not mix with the results printed
    on stdout.

    Parameters
    ----------
    level: int, optional
        Logging level, e.g. logging.DEBUG. Default is logging.WARNING.
    log_file: str, optional
        Path of a file where the messages are also written.
    """
    logger = logging.getLogger("augarr")
    logger.setLevel(level)

    # avoid duplicate messages when called twice
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                                  datefmt="%H:%M:%S")
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
