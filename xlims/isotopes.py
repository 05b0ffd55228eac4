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
Theoretical isotope envelopes of shifted masses and the search for them in a scan.

An envelope that is not found is searched a second time shifted to the left by one isotope
spacing, in case the given mass was picked from the first isotope peak instead of the
monoisotopic one.
"""
from enum import Enum
import numpy as np
from xlims import dtypes
from xlims.const import PROTON_MASS, ISOTOPE_SPACING, SATELLITE_PEAKS


class SearchState(Enum):
    NOT_SEARCHED = 0
    RETRYING = 1
    FOUND = 2
    NOT_FOUND = 3


class IsotopeEnvelope:
    """Theoretical isotope peaks around a monoisotopic mass at a given charge."""

    def __init__(self, peaks, mono_mass, mono_mz, charge, spacing):
        """
        Initialise the IsotopeEnvelope.

        :param peaks: (ndarray, dtypes.envelope_peaks) peaks in ascending m/z order
        :param mono_mass: (float) monoisotopic mass
        :param mono_mz: (float) monoisotopic m/z
        :param charge: (int) charge state
        :param spacing: (float) isotope spacing in Dalton
        """
        self.peaks = peaks
        self.mono_mass = mono_mass
        self.mono_mz = mono_mz
        self.charge = charge
        self.spacing = spacing

    def __len__(self):
        return len(self.peaks)

    @property
    def mz_spacing(self):
        return self.spacing / self.charge

    def shift_left(self):
        """Return a copy of the envelope moved down by one isotope spacing."""
        peaks = self.peaks.copy()
        peaks['mz'] -= self.mz_spacing
        return IsotopeEnvelope(peaks, self.mono_mass - self.spacing,
                               self.mono_mz - self.mz_spacing, self.charge, self.spacing)


def build_envelope(mass, charge, spacing=ISOTOPE_SPACING, satellite_peaks=SATELLITE_PEAKS):
    """
    Build the theoretical isotope envelope of a mass.

    The monoisotopic peak has a height of 1 and the k-th peak on either side a height of
    1 - k/4.

    :param mass: (float) monoisotopic mass
    :param charge: (int) charge state
    :param spacing: (float) isotope spacing in Dalton
    :param satellite_peaks: (int) number of peaks on each side of the monoisotopic peak
    :return: (IsotopeEnvelope)
    """
    mono_mz = mass / charge + PROTON_MASS
    offsets = np.arange(-satellite_peaks, satellite_peaks + 1)
    peaks = np.empty(len(offsets), dtype=dtypes.envelope_peaks)
    peaks['mz'] = mono_mz + offsets * spacing / charge
    peaks['height'] = 1 - np.abs(offsets) / 4
    return IsotopeEnvelope(peaks, mass, mono_mz, charge, spacing)


def search_envelope(detector, candidate_peaks, mass, charge, tolerance_ppm,
                    spacing=ISOTOPE_SPACING, satellite_peaks=SATELLITE_PEAKS):
    """
    Look for the isotope envelope of a mass among the peaks of a scan.

    If the envelope is not found it is searched once more shifted left by one isotope spacing.

    :param detector: (BaseIsotopeDetector) detector doing the actual matching
    :param candidate_peaks: (ndarray, dtypes.isotopic_peaks) peaks sorted by m/z
    :param mass: (float) shifted monoisotopic mass
    :param charge: (int) charge state
    :param tolerance_ppm: (float) peak matching tolerance
    :return: (SearchState, IsotopicProfile|None) terminal state (FOUND or NOT_FOUND) and the
        matched profile
    """
    state = SearchState.NOT_SEARCHED
    envelope = build_envelope(mass, charge, spacing, satellite_peaks)

    while True:
        profile = detector.find_profile(candidate_peaks, envelope, tolerance_ppm)
        if profile is not None:
            return SearchState.FOUND, profile
        if state == SearchState.RETRYING:
            return SearchState.NOT_FOUND, None
        state = SearchState.RETRYING
        envelope = envelope.shift_left()
