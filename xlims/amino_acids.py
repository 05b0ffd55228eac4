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

"""Elemental compositions of amino acid residues and the masses derived from them."""
from collections import Counter
from pyteomics.mass import calculate_mass
from xlims import const

# residue compositions (without the water of the peptide bond)
ELEMENTAL_COMPOSITION = {
    'A': {'C': 3, 'H': 5, 'N': 1, 'O': 1},
    'C': {'C': 3, 'H': 5, 'N': 1, 'O': 1, 'S': 1},
    'D': {'C': 4, 'H': 5, 'N': 1, 'O': 3},
    'E': {'C': 5, 'H': 7, 'N': 1, 'O': 3},
    'F': {'C': 9, 'H': 9, 'N': 1, 'O': 1},
    'G': {'C': 2, 'H': 3, 'N': 1, 'O': 1},
    'H': {'C': 6, 'H': 7, 'N': 3, 'O': 1},
    'I': {'C': 6, 'H': 11, 'N': 1, 'O': 1},
    # cysteine carrying a heme group
    'J': {'C': 37, 'H': 36, 'N': 5, 'O': 5, 'S': 1, 'Fe': 1},
    'K': {'C': 6, 'H': 12, 'N': 2, 'O': 1},
    'L': {'C': 6, 'H': 11, 'N': 1, 'O': 1},
    'M': {'C': 5, 'H': 9, 'N': 1, 'O': 1, 'S': 1},
    'N': {'C': 4, 'H': 6, 'N': 2, 'O': 2},
    'P': {'C': 5, 'H': 7, 'N': 1, 'O': 1},
    'Q': {'C': 5, 'H': 8, 'N': 2, 'O': 2},
    'R': {'C': 6, 'H': 12, 'N': 4, 'O': 1},
    'S': {'C': 3, 'H': 5, 'N': 1, 'O': 2},
    'T': {'C': 4, 'H': 7, 'N': 1, 'O': 2},
    'V': {'C': 5, 'H': 9, 'N': 1, 'O': 1},
    'W': {'C': 11, 'H': 10, 'N': 2, 'O': 1},
    'Y': {'C': 9, 'H': 9, 'N': 1, 'O': 2},
}

# calculate monoisotopic residue masses from the compositions
residue_masses = {aa: calculate_mass(composition=comp)
                  for aa, comp in ELEMENTAL_COMPOSITION.items()}

# Precalculate terminal mass
unmodified_termini_mass = calculate_mass(formula='H') + calculate_mass(formula='OH')

C13_DIFF = const.CARBON_13_MASS - const.CARBON_12_MASS
N15_DIFF = const.NITROGEN_15_MASS - const.NITROGEN_14_MASS


class UnknownResidueError(KeyError):
    """A sequence contains a residue code that has no known composition."""

    def __init__(self, residue, position, sequence):
        super().__init__(residue)
        self.residue = residue
        self.position = position
        self.sequence = sequence

    def __str__(self):
        return "Unknown residue '%s' at position %d of %s" % (
            self.residue, self.position + 1, self.sequence)


def _check_residues(sequence):
    for i, aa in enumerate(sequence):
        if aa not in ELEMENTAL_COMPOSITION:
            raise UnknownResidueError(aa, i, sequence)


def composition(sequence):
    """
    Sum up the elemental composition of a sequence of residues.

    :param sequence: (str) one-letter amino acid sequence
    :return: (Counter) element -> count (residues only, no water)
    """
    _check_residues(sequence)
    total = Counter()
    for aa in sequence:
        total.update(ELEMENTAL_COMPOSITION[aa])
    return total


def residue_mass(residue):
    """Return the monoisotopic mass of a single residue."""
    try:
        return residue_masses[residue]
    except KeyError:
        raise UnknownResidueError(residue, 0, residue) from None


def peptide_mass(sequence):
    """Return the monoisotopic neutral mass of a peptide (residues plus termini)."""
    _check_residues(sequence)
    return sum(residue_masses[aa] for aa in sequence) + unmodified_termini_mass


def calculate_mass_shift(sequence, labeling):
    """
    Calculate the mass difference between the light and the labelled version of a peptide.

    :param sequence: (str) one-letter amino acid sequence
    :param labeling: (IsotopeLabelConfig) which labels are in use and the static delta mass
    :return: (float) mass shift in Dalton
    """
    comp = composition(sequence)
    shift = 0.0
    if labeling.use_c13:
        shift += comp['C'] * C13_DIFF
    if labeling.use_n15:
        shift += comp['N'] * N15_DIFF
    if labeling.has_static_delta:
        shift += labeling.static_delta_mass
    return shift
