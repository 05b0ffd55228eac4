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
from numpy.testing import assert_almost_equal
from xlims.amino_acids import peptide_mass
from xlims.config import DigestionConfig, Enzyme
from xlims.digestion import digest, digest_sequences, Peptide


def test_full_digestion():
    config = DigestionConfig(missed_cleavages=0, min_peptide_length=1)
    assert digest_sequences('AEQVSKQEISHFK', config) == ['AEQVSK', 'QEISHFK']

    config = DigestionConfig(missed_cleavages=1, min_peptide_length=1)
    assert digest_sequences('AEQVSKQEISHFK', config) == ['AEQVSK', 'AEQVSKQEISHFK', 'QEISHFK']

    # no cleavage before proline
    config = DigestionConfig(missed_cleavages=0, min_peptide_length=1)
    assert digest_sequences('AAKPAAK', config) == ['AAKPAAK']
    assert digest_sequences('AARAAK', config) == ['AAR', 'AAK']


def test_length_filters():
    config = DigestionConfig(missed_cleavages=1, min_peptide_length=7, max_peptide_length=12)
    assert digest_sequences('AEQVSKQEISHFK', config) == ['QEISHFK']


def test_partial_digestion():
    full = digest_sequences('AEQVSKQEISHFK',
                            DigestionConfig(missed_cleavages=0, min_peptide_length=4))
    partial = digest_sequences('AEQVSKQEISHFK',
                               DigestionConfig(specificity='partial', missed_cleavages=0,
                                               min_peptide_length=4))
    assert set(full) < set(partial)
    assert 'QEIS' in partial
    assert 'SHFK' in partial
    assert all(len(p) >= 4 for p in partial)


def test_no_digestion_rule():
    config = DigestionConfig(specificity='none', min_peptide_length=2, max_peptide_length=3)
    assert digest_sequences('ACDE', config) == ['AC', 'ACD', 'CD', 'CDE', 'DE']


def test_custom_enzyme():
    config = DigestionConfig(enzyme=Enzyme(name='glu-c', cterminal_of=['E']),
                             missed_cleavages=0, min_peptide_length=1)
    assert digest_sequences('AEGGEK', config) == ['AE', 'GGE', 'K']


def test_digest():
    config = DigestionConfig(missed_cleavages=0, min_peptide_length=1)
    peptides = digest('AEQVSKQEISHFK', 'P1', config)
    assert [p.sequence for p in peptides] == ['AEQVSK', 'QEISHFK']
    assert all(isinstance(p, Peptide) for p in peptides)
    assert all(p.protein_id == 'P1' for p in peptides)
    assert_almost_equal(peptides[0].mass, peptide_mass('AEQVSK'))
