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
from collections import Counter
from numpy.testing import assert_almost_equal
from xlims import const
from xlims.amino_acids import peptide_mass, calculate_mass_shift
from xlims.config import Crosslinker
from xlims.crosslinks import CrossLink, ModType, count_crosslink_sites, generate_crosslinks, \
    sort_crosslinks
from xlims.digestion import Peptide


def make_peptide(sequence, protein_id='P1'):
    return Peptide(sequence, peptide_mass(sequence), protein_id)


def test_count_crosslink_sites():
    bs3 = Crosslinker.BS3
    # the c-terminal K is not a site
    assert count_crosslink_sites('GSGTGK', 'MGSGTGK', bs3) == 2
    assert count_crosslink_sites('GKGK', 'MGKGK', bs3) == 1
    # protein n-terminal peptide gets an additional site
    assert count_crosslink_sites('GSGTGK', 'GSGTGKMM', bs3) == 3
    assert count_crosslink_sites('GAGAGR', 'MGAGAGR', bs3) == 0
    assert count_crosslink_sites('YAYAR', 'MYAYAR', bs3) == 2

    k_only = Crosslinker(name='k-only', linker_mass=100.0, dead_end_mass=118.0,
                         specificity=['K'], trimmed_residue='')
    assert count_crosslink_sites('GSGTGK', 'GSGTGK', k_only) == 1


def test_crosslink_equality():
    peptide = make_peptide('GSGTGK')
    other = make_peptide('GTGSGK')
    a = CrossLink('P1', peptide, other, 1000.0, ModType.TWO, (1.0, 2.0))
    b = CrossLink('P1', other, peptide, 1000.0, ModType.TWO, (2.0, 1.0))
    c = CrossLink('P1', other, peptide, 1000.0, ModType.ZERO_TWO, (2.0, 1.0))
    d = CrossLink('P2', other, peptide, 1000.0, ModType.TWO, (2.0, 1.0))
    assert a == b
    assert len({a, b, c, d}) == 3
    assert a.num_peptides == 2
    assert a.sequence_two == 'GTGSGK'

    single = CrossLink('P1', peptide, None, 500.0, ModType.NONE, (1.0,))
    assert single.num_peptides == 1
    assert single.sequence_two is None


def test_single_peptide_crosslinks(search_config):
    peptide = make_peptide('GSGTGK')
    crosslinks = generate_crosslinks([peptide], 'MGSGTGK', 'P1', search_config)
    singles = [xl for xl in crosslinks if xl.num_peptides == 1]
    counts = Counter(xl.mod_type for xl in singles)
    assert counts == {ModType.NONE: 1, ModType.ZERO: 2, ModType.ONE: 1}

    masses = sorted(xl.mass for xl in singles if xl.mod_type == ModType.ZERO)
    assert_almost_equal(masses[0], peptide.mass + const.DEAD_END_MASS)
    assert_almost_equal(masses[1], peptide.mass + 2 * const.DEAD_END_MASS)

    loop = [xl for xl in singles if xl.mod_type == ModType.ONE][0]
    assert_almost_equal(loop.mass, peptide.mass + const.LINKER_MASS)
    shift = calculate_mass_shift('GSGTGK', search_config.labeling)
    assert_almost_equal(loop.mass_shifts[0], shift)


def test_dead_end_and_loop(search_config):
    crosslinks = generate_crosslinks([make_peptide('STSTGK')], 'MSTSTGK', 'P1', search_config)
    counts = Counter(xl.mod_type for xl in crosslinks if xl.num_peptides == 1)
    assert counts == {ModType.NONE: 1, ModType.ZERO: 4, ModType.ONE: 3, ModType.ZERO_ONE: 2}

    peptide_mass_ = peptide_mass('STSTGK')
    zero_one = sorted(xl.mass for xl in crosslinks if xl.mod_type == ModType.ZERO_ONE)
    assert_almost_equal(zero_one[0], peptide_mass_ + const.LINKER_MASS + const.DEAD_END_MASS)
    assert_almost_equal(zero_one[1],
                        peptide_mass_ + const.LINKER_MASS + 2 * const.DEAD_END_MASS)


def test_peptide_pairs(search_config):
    peptide = make_peptide('GSGTGK')
    crosslinks = generate_crosslinks([peptide], 'MGSGTGK', 'P1', search_config)
    pairs = [xl for xl in crosslinks if xl.num_peptides == 2]
    counts = Counter(xl.mod_type for xl in pairs)
    # 4 sites in total: 1 or 2 linkers, up to 2 dead-ends next to a single linker
    assert counts == {ModType.TWO: 2, ModType.ZERO_TWO: 2}
    assert all(len(xl.mass_shifts) == 2 for xl in pairs)

    two = sorted(xl.mass for xl in pairs if xl.mod_type == ModType.TWO)
    assert_almost_equal(two[0], 2 * peptide.mass + const.LINKER_MASS)
    assert_almost_equal(two[1], 2 * peptide.mass + 2 * const.LINKER_MASS)


def test_no_sites(search_config):
    peptides = [make_peptide('GAGAGK'), make_peptide('GSGTGK')]
    crosslinks = generate_crosslinks(peptides, 'MGAGAGKGSGTGK', 'P1', search_config)
    gagagk = [xl for xl in crosslinks
              if 'GAGAGK' in (xl.sequence_one, xl.sequence_two)]
    assert len(gagagk) == 1
    assert gagagk[0].mod_type == ModType.NONE


def test_sort_crosslinks(search_config):
    peptides = [make_peptide('GSGTGK'), make_peptide('STSTGK')]
    crosslinks = sort_crosslinks(
        generate_crosslinks(peptides, 'MGSGTGKSTSTGK', 'P1', search_config))
    masses = [xl.mass for xl in crosslinks]
    assert masses == sorted(masses)
    assert crosslinks[0].mod_type == ModType.NONE
    assert crosslinks[0].sequence_one == 'GSGTGK'
