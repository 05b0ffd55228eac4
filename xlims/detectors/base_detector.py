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

"""Module containing the base class for all isotopic profile detectors."""
import abc
from collections import namedtuple

# peaks: matched observed peaks (dtypes.isotopic_peaks) in ascending m/z order
IsotopicProfile = namedtuple('IsotopicProfile', ['peaks', 'mono_mass', 'mono_mz', 'charge'])


class BaseIsotopeDetector(abc.ABC):
    """
    Base class for isotopic profile detectors.

    Detectors must not keep state between calls; the same instance is used for every search.
    """

    @abc.abstractmethod
    def find_profile(self, candidate_peaks, envelope, tolerance_ppm):
        """
        Look for a theoretical envelope among observed peaks.

        :param candidate_peaks: (ndarray, dtypes.isotopic_peaks) peaks sorted by m/z
        :param envelope: (IsotopeEnvelope) theoretical envelope
        :param tolerance_ppm: (float) m/z matching tolerance
        :return: (IsotopicProfile|None) the matched profile or None if not found
        """
        pass
