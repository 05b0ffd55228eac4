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
Enumeration of theoretical crosslinked species.

Every peptide of a digest is combined with itself alone (unmodified, dead-ends, intra-peptide
loops) and with every peptide of the digest (inter-peptide links, optionally with additional
dead-ends).
"""
from enum import Enum
from xlims.amino_acids import calculate_mass_shift


class ModType(Enum):
    """How the crosslinker modifies the peptide(s) of a crosslinked species."""

    # unmodified peptide
    NONE = 'None'
    # one or more dead-ends
    ZERO = 'Zero'
    # one or more intra-peptide loops
    ONE = 'One'
    # one linker bridging two peptides
    TWO = 'Two'
    # dead-ends and loops
    ZERO_ONE = 'ZeroOne'
    # dead-ends on a pair of linked peptides
    ZERO_TWO = 'ZeroTwo'


# position of each type when sorting crosslinks with identical mass
_MOD_TYPE_ORDER = {t: i for i, t in enumerate(ModType)}


class CrossLink:
    """
    A theoretical crosslinked species.

    Two CrossLinks are considered the same if protein, mass and modification type match, so
    the inter-peptide link A-B and B-A collapse into one when collected in a set.
    """

    def __init__(self, protein_id, peptide_one, peptide_two, mass, mod_type, mass_shifts):
        """
        Initialise the CrossLink.

        :param protein_id: (str) protein the peptides were digested from
        :param peptide_one: (Peptide) first peptide
        :param peptide_two: (Peptide|None) second peptide, None for a single peptide species
        :param mass: (float) monoisotopic mass of the species
        :param mod_type: (ModType) modification type
        :param mass_shifts: (tuple of float) isotope label shift for each peptide
        """
        self.protein_id = protein_id
        self.peptide_one = peptide_one
        self.peptide_two = peptide_two
        self.mass = mass
        self.mod_type = mod_type
        self.mass_shifts = tuple(mass_shifts)

    def __eq__(self, other):
        if not isinstance(other, CrossLink):
            return NotImplemented
        return self.protein_id == other.protein_id and self.mass == other.mass and \
            self.mod_type == other.mod_type

    def __hash__(self):
        return hash((self.protein_id, self.mass, self.mod_type))

    def __repr__(self):
        return "CrossLink(%s, %s, %s, %.6f, %s)" % (
            self.protein_id, self.sequence_one, self.sequence_two, self.mass,
            self.mod_type.value)

    @property
    def sequence_one(self):
        return self.peptide_one.sequence

    @property
    def sequence_two(self):
        return None if self.peptide_two is None else self.peptide_two.sequence

    @property
    def num_peptides(self):
        return 1 if self.peptide_two is None else 2


def count_crosslink_sites(sequence, protein_sequence, crosslinker):
    """
    Count the residues of a peptide the crosslinker can react with.

    A residue matching the crosslinker's trimmed residue at the c-terminus of the peptide is not
    counted (the protease cut after it). The protein n-terminus counts as an extra site for the
    n-terminal peptide of the protein if the crosslinker reacts with it.

    :param sequence: (str) peptide sequence
    :param protein_sequence: (str) sequence of the protein the peptide was digested from
    :param crosslinker: (Crosslinker) crosslinker config
    :return: (int) number of linkable sites
    """
    trimmed = sequence
    if crosslinker.trimmed_residue and sequence.endswith(crosslinker.trimmed_residue):
        trimmed = sequence[:-1]

    sites = sum(1 for aa in trimmed if aa in crosslinker.site_residues)

    if crosslinker.nterm and protein_sequence.startswith(sequence):
        sites += 1
    return sites


def _single_peptide_crosslinks(peptide, sites, protein_id, shift, crosslinker):
    linker_mass = crosslinker.linker_mass
    dead_end_mass = crosslinker.dead_end_mass
    shifts = (shift,)

    yield CrossLink(protein_id, peptide, None, peptide.mass, ModType.NONE, shifts)
    if sites == 0:
        return

    for i in range(1, sites + 1):
        yield CrossLink(protein_id, peptide, None, peptide.mass + i * dead_end_mass,
                        ModType.ZERO, shifts)

    for i in range(1, sites):
        yield CrossLink(protein_id, peptide, None, peptide.mass + i * linker_mass,
                        ModType.ONE, shifts)

    if sites >= 3:
        for i in range(1, sites // 2 + 1):
            for j in range(1, sites - 2 * i + 1):
                mass = peptide.mass + i * linker_mass + j * dead_end_mass
                yield CrossLink(protein_id, peptide, None, mass, ModType.ZERO_ONE, shifts)


def _peptide_pair_crosslinks(peptide_one, peptide_two, sites_one, sites_two, protein_id,
                             shifts, crosslinker):
    if sites_one == 0 or sites_two == 0:
        return
    total_sites = sites_one + sites_two
    base_mass = peptide_one.mass + peptide_two.mass

    for i in range(1, total_sites // 2 + 1):
        for j in range(0, total_sites - 2 * i + 1):
            mass = base_mass + i * crosslinker.linker_mass + j * crosslinker.dead_end_mass
            mod_type = ModType.TWO if j == 0 else ModType.ZERO_TWO
            yield CrossLink(protein_id, peptide_one, peptide_two, mass, mod_type, shifts)


def generate_crosslinks(peptides, protein_sequence, protein_id, config):
    """
    Enumerate all theoretical crosslinked species of a digest.

    :param peptides: (list of Peptide) peptides digested from the protein
    :param protein_sequence: (str) protein sequence (needed for the n-terminal site)
    :param protein_id: (str) protein identifier
    :param config: (Config) search config (crosslinker and isotope labelling)
    :return: (set of CrossLink) unique crosslinked species
    """
    crosslinker = config.crosslinker
    sites = [count_crosslink_sites(p.sequence, protein_sequence, crosslinker) for p in peptides]
    shifts = [calculate_mass_shift(p.sequence, config.labeling) for p in peptides]

    crosslinks = set()
    for first, peptide_one in enumerate(peptides):
        crosslinks.update(_single_peptide_crosslinks(
            peptide_one, sites[first], protein_id, shifts[first], crosslinker))

        for second, peptide_two in enumerate(peptides):
            crosslinks.update(_peptide_pair_crosslinks(
                peptide_one, peptide_two, sites[first], sites[second], protein_id,
                (shifts[first], shifts[second]), crosslinker))
    return crosslinks


def sort_crosslinks(crosslinks):
    """Order crosslinks by ascending mass; ties are ordered by type and sequences."""
    return sorted(crosslinks, key=lambda xl: (xl.mass, _MOD_TYPE_ORDER[xl.mod_type],
                                              xl.sequence_one, xl.sequence_two or ''))
