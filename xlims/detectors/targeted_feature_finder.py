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

"""Targeted detection of a theoretical isotope envelope among the peaks of a scan."""
import numpy as np
from xlims.detectors.base_detector import BaseIsotopeDetector, IsotopicProfile
from xlims.lookup import range_match, ppm_tolerance


class TargetedFeatureFinder(BaseIsotopeDetector):
    """
    Match an envelope by anchoring its most intense theoretical peak.

    The most intense theoretical peak has to be matched, otherwise the envelope counts as not
    found. From there neighbouring theoretical peaks are matched outwards in both directions
    until the first peak without an observed counterpart.
    """

    def _match_peak(self, mz_values, intensities, mz, tolerance_ppm):
        """Index of the most intense observed peak within tolerance of mz, or -1."""
        tol = ppm_tolerance(mz, tolerance_ppm)
        start, end = range_match(mz_values, mz - tol, mz + tol)
        if start == end:
            return -1
        return start + int(np.argmax(intensities[start:end]))

    def find_profile(self, candidate_peaks, envelope, tolerance_ppm):
        if len(candidate_peaks) == 0:
            return None

        mz_values = candidate_peaks['mz']
        intensities = candidate_peaks['intensity']
        theoretical_mz = envelope.peaks['mz']

        anchor = int(np.argmax(envelope.peaks['height']))
        anchor_match = self._match_peak(mz_values, intensities, theoretical_mz[anchor],
                                        tolerance_ppm)
        if anchor_match < 0:
            return None
        matches = {anchor: anchor_match}

        for direction in (-1, 1):
            i = anchor + direction
            while 0 <= i < len(theoretical_mz):
                match = self._match_peak(mz_values, intensities, theoretical_mz[i],
                                         tolerance_ppm)
                if match < 0:
                    break
                matches[i] = match
                i += direction

        matched_peaks = candidate_peaks[[matches[i] for i in sorted(matches)]]
        return IsotopicProfile(peaks=matched_peaks, mono_mass=envelope.mono_mass,
                               mono_mz=envelope.mono_mz, charge=envelope.charge)
