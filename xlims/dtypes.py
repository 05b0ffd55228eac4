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

"""Central place for reused numpy data types."""
import numpy as np


features = np.dtype([
    ('feature_id', np.int64),       # id of the feature as given in the feature file
    ('charge', np.int32),           # representative charge state
    ('scan_lc_start', np.int32),    # first LC scan the feature was observed in
    ('scan_lc_end', np.int32),      # last LC scan the feature was observed in
    ('scan_lc_rep', np.int32),      # representative LC scan (apex)
    ('scan_ims_rep', np.int32),     # representative IMS scan
    ('mass', np.float64),           # monoisotopic mass
    ('mz', np.float64),             # monoisotopic m/z (derived from mass and charge)
    ('drift_time', np.float64),     # drift time at the representative IMS scan
    ('abundance', np.float64),      # summed abundance of the feature
])

isotopic_peaks = np.dtype([
    ('scan_lc', np.int32),          # LC scan (frame) of the peak
    ('scan_ims', np.int32),         # IMS scan of the peak
    ('mz', np.float64),             # peak m/z value
    ('intensity', np.float64),      # peak intensity
])

envelope_peaks = np.dtype([
    ('mz', np.float64),             # theoretical m/z value
    ('height', np.float64),         # relative theoretical height (mono peak = 1)
])
