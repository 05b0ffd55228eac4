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
import json
import re
import pytest
from numpy.testing import assert_almost_equal
from xlims.config import Config, Setting, ConfigGroup, ListSetting, Crosslinker, ConfigReader, \
    Enzyme, DigestionConfig, IsotopeLabelConfig, IsotopeDetectorConfig
from xlims import const


def test_config_system():
    """ Test the configuration system """

    class SubConfig(ConfigGroup):
        v1 = Setting(int, 1)
        v2 = Setting(str, "hello")

    class TestConfig(ConfigGroup):
        i1 = Setting(int, '2')
        f1 = Setting(float, 4)
        s1 = Setting(str, 5)
        l1 = ListSetting(int, [1, "2"])
        sub1 = Setting(SubConfig, SubConfig(v1=2))
        v_list = Setting(int, valid_values=[1, 2, 3], default=2)
        v_re = Setting(str, valid_values=re.compile('[A-z]+$'), required=False)
        v_required = Setting(str, required=True)
        i_min = Setting(int, 0, min_value=0)
        f_max = Setting(float, 2.0, max_value=3.5)

    config = TestConfig(v_required='str')
    expected_results = dict(i1=2, f1=4.0, s1="5", l1=[1, 2], v_list=2, i_min=0, f_max=2.0)
    for setting, expected_value in expected_results.items():
        value = getattr(config, setting)
        assert type(value) is type(expected_value)
        assert value == expected_value
    assert config.sub1.v1 == 2
    assert config.sub1.v2 == "hello"

    # dicts are turned into the nested group
    config.sub1 = {'v2': 'bye'}
    assert config.sub1.v1 == 1
    assert config.sub1.v2 == 'bye'

    # a single value for a list setting becomes a list
    config.l1 = 7
    assert config.l1 == [7]

    with pytest.raises(AttributeError):
        TestConfig()
    with pytest.raises(KeyError):
        TestConfig(v_required='str', unknown=1)
    with pytest.raises(TypeError):
        config.i1 = 'one'
    with pytest.raises(ValueError):
        config.v_list = 4
    with pytest.raises(ValueError):
        config.v_re = '123'
    with pytest.raises(ValueError):
        config.i_min = -1
    with pytest.raises(ValueError):
        config.f_max = 3.5
    with pytest.raises(TypeError):
        Setting(str, min_value=1)


def test_tolerance():
    config = Config(ms1_tol='15 ppm')
    assert config.ms1_ppm == 15
    # the isotope tolerance defaults to the ms1 tolerance
    assert config.isotope_config.tolerance == 15

    assert Config(ms1_tol=7.5).ms1_ppm == 7.5
    config = Config(ms1_tol='10ppm', isotope_config={'tolerance': 5})
    assert config.isotope_config.tolerance == 5

    with pytest.raises(AttributeError):
        Config()
    with pytest.raises(ValueError):
        Config(ms1_tol='-5 ppm')
    with pytest.raises(ValueError):
        Config(ms1_tol='0 ppm')
    with pytest.raises(ValueError):
        Config(ms1_tol='5 Da')


def test_labeling_conflict():
    labeling = IsotopeLabelConfig()
    assert labeling.use_c13
    assert labeling.use_n15
    assert not labeling.has_static_delta

    with pytest.raises(ValueError):
        IsotopeLabelConfig(use_c13=False, use_n15=False)
    with pytest.raises(ValueError):
        IsotopeLabelConfig(use_c13=False, use_n15=False, static_delta_mass=0.0)
    with pytest.raises(ValueError):
        Config(ms1_tol='20 ppm', labeling={'use_c13': False, 'use_n15': False})

    labeling = IsotopeLabelConfig(use_c13=False, use_n15=False, static_delta_mass=4.0)
    assert labeling.has_static_delta
    labeling = IsotopeLabelConfig(use_c13=False)
    assert labeling.use_n15


def test_crosslinker():
    bs3 = Crosslinker.BS3
    assert bs3.nterm
    assert bs3.site_residues == frozenset("KSTY")
    assert bs3.trimmed_residue == 'K'
    assert bs3.linker_mass == const.LINKER_MASS
    assert bs3.dead_end_mass == const.DEAD_END_MASS

    # presets can be referred to by name
    config = Config(ms1_tol='20 ppm', crosslinker='BS3')
    assert config.crosslinker == Crosslinker.BS3

    xl = Crosslinker(name='K-only', linker_mass=100, dead_end_mass=118, specificity=['K'],
                     trimmed_residue='')
    assert not xl.nterm
    assert xl.site_residues == frozenset('K')

    with pytest.raises(ValueError):
        Crosslinker(name='bad', linker_mass=1, dead_end_mass=2, specificity=['KS'])


def test_enzyme():
    assert Enzyme.trypsin.rule == '(K|R)(?!P)'
    assert Enzyme(name='lys-c', cterminal_of=['K']).rule == '(K)'
    assert Enzyme(name='custom', rule='[DE]').rule == '[DE]'
    with pytest.raises(ValueError):
        Enzyme(name='nothing')
    with pytest.raises(ValueError):
        Enzyme(name='both', rule='K', cterminal_of=['K'])


def test_digestion_config():
    digestion = DigestionConfig()
    assert digestion.specificity == 'full'
    assert digestion.missed_cleavages == 1
    assert digestion.enzyme == Enzyme.trypsin

    assert DigestionConfig(enzyme='trypsin').enzyme == Enzyme.trypsin
    with pytest.raises(ValueError):
        DigestionConfig(specificity='semi')
    with pytest.raises(ValueError):
        DigestionConfig(missed_cleavages=-1)
    with pytest.raises(ValueError):
        DigestionConfig(min_peptide_length=10, max_peptide_length=5)


def test_isotope_detector_config():
    config = IsotopeDetectorConfig()
    assert config.isotope_spacing == 1.003
    assert config.satellite_peaks == 3
    with pytest.raises(ValueError):
        IsotopeDetectorConfig(satellite_peaks=0)
    with pytest.raises(ValueError):
        IsotopeDetectorConfig(satellite_peaks=4)


def test_to_dict():
    config = Config(ms1_tol='10 ppm', digestion={'missed_cleavages': 2})
    assert config.to_dict() == {'ms1_tol': '10 ppm', 'digestion': {'missed_cleavages': 2}}

    full = config.to_dict(excl_defaults=False)
    assert full['threads'] == 1
    assert full['labeling'] == {'use_c13': True, 'use_n15': True, 'static_delta_mass': 0.0}
    assert full['isotope_config']['tolerance'] == 10

    assert json.loads(config.to_json()) == config.to_dict()


def test_config_reader(tmpdir):
    config = ConfigReader.loads_yaml("ms1_tol: 15 ppm\nlabeling:\n  use_n15: false\n")
    assert config.ms1_ppm == 15
    assert config.labeling.use_c13
    assert not config.labeling.use_n15

    config = ConfigReader.loads_json('{"ms1_tol": "5 ppm", "threads": 3}')
    assert config.ms1_ppm == 5
    assert config.threads == 3

    config = Config(ms1_tol='12 ppm', digestion={'specificity': 'partial'},
                    labeling={'static_delta_mass': 1.5})

    yaml_file = str(tmpdir.join('config.yaml'))
    config.write_yaml(yaml_file)
    read_config = ConfigReader.load_file(yaml_file)
    assert read_config.ms1_ppm == 12
    assert read_config.digestion.specificity == 'partial'
    assert_almost_equal(read_config.labeling.static_delta_mass, 1.5)

    json_file = str(tmpdir.join('config.json'))
    config.write(json_file)
    read_config = ConfigReader.load_file(json_file)
    assert read_config.to_dict() == config.to_dict()

    # the format of files with other extensions is guessed
    other_file = str(tmpdir.join('config.txt'))
    config.write(other_file)
    assert ConfigReader.load_file(other_file).to_dict() == config.to_dict()

    assert ConfigReader.load_settings(yaml_file)['ms1_tol'] == '12 ppm'

    with open(json_file) as f:
        assert ConfigReader.load_json(f).to_dict() == config.to_dict()
    with open(yaml_file) as f:
        assert ConfigReader.load_yaml(f).to_dict() == config.to_dict()


def test_hash():
    assert Config(ms1_tol='10 ppm').hash() == Config(ms1_tol='10 ppm').hash()
    assert Config(ms1_tol='10 ppm').hash() != Config(ms1_tol='11 ppm').hash()


def test_group_from_strings():
    digestion = DigestionConfig.from_json('{"missed_cleavages": 3, "enzyme": "trypsin"}')
    assert digestion.missed_cleavages == 3
    assert digestion.enzyme == Enzyme.trypsin

    labeling = IsotopeLabelConfig.from_yaml("use_c13: false\n")
    assert not labeling.use_c13
    assert 'use_c13' in labeling
    assert 'use_h2' not in labeling
