# Copyright (C) 2025  Technische Universitaet Berlin
#
# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 3 of the License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301
# USA

"""
xlims: search for crosslinked peptides in LC-IMS-MS data.

- Configuration and constants (config, const, dtypes)
- Theoretical crosslinks (amino_acids, digestion, fasta, crosslinks)
- Matching (lookup, isotopes, detectors/, search)
- I/O (readers, output_format, xl_logging, cli)
"""

__version__ = "1.0.0"

from . import config
from . import const
from . import dtypes
from . import amino_acids
from . import digestion
from . import fasta
from . import crosslinks
from . import lookup
from . import isotopes
from . import search
from . import readers
from . import output_format
from . import utils
from . import xl_logging

# Subpackages
from . import detectors

__all__ = [
    "config",
    "const",
    "dtypes",
    "amino_acids",
    "digestion",
    "fasta",
    "crosslinks",
    "lookup",
    "isotopes",
    "search",
    "readers",
    "output_format",
    "utils",
    "xl_logging",
    "detectors",
]
