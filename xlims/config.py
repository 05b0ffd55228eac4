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

"""Configuration for running a crosslink search on LC-IMS-MS data."""
import json
import sys
import yaml
import re
import copy
from xlims import const

# Unique sentinel, used to allow None to be a valid default for a setting.
NO_DEFAULT = object()


def stringhash(s):
    """
    Create a stable hash code for strings.

    hash(str) is salted per interpreter run, so config hashes would not be comparable between
    runs otherwise.
    """
    return hash(tuple(ord(x) for x in s))


class Setting:
    """A setting supported by the config system."""

    def __init__(self, type, default=NO_DEFAULT, valid_values=None, required=True,
                 min_value=None, max_value=None):
        """
        Initialise the Setting.

        :param type: Python type expected for this setting.
        :param default: Default value for this setting.
        :param valid_values: Tuple of accepted values, re pattern, or None to accept any value.
        :param min_value: Minimum value of setting (for float or int types)
        :param max_value: Maximum value of setting (for float or int types)
        """
        self.type = type
        self.valid_values = valid_values
        if (min_value is not None or max_value is not None) and \
                not (issubclass(self.type, int) or issubclass(self.type, float)):
            raise TypeError("min_value and max_value are only supported for int and float type.")
        self.min_value = min_value
        self.max_value = max_value
        if default is not NO_DEFAULT:
            try:
                self.default = self.accept(default)
            except TypeError:
                raise TypeError("Default '%s' is not valid and could not be coerced "
                                "into the expected type (%s)" % (repr(default),
                                                                 repr(self.type))) from None
            self.required = False
        else:
            self.required = required

    def accept(self, value):
        """
        Coerce a value and check that it is valid.

        :param value: (mixed) value to check
        :return: (mixed) the coerced value
        """
        coerced_value = self.coerce(value)
        if self.min_value is not None and coerced_value < self.min_value:
            raise ValueError(f'{coerced_value} is below min_value({self.min_value})!')
        if self.max_value is not None and coerced_value >= self.max_value:
            raise ValueError(f'{coerced_value} is above max_value({self.max_value})!')
        if self.valid_values is not None:
            if isinstance(self.valid_values, re.Pattern):
                if self.valid_values.match(coerced_value) is None:
                    raise ValueError(f'{coerced_value} is not valid!'
                                     f' Valid values need to match: {self.valid_values.pattern}')
            elif coerced_value not in self.valid_values:
                raise ValueError(f'{coerced_value} is not valid!'
                                 f' Valid values are: {self.valid_values}')
        return coerced_value

    def coerce(self, value):
        """
        Coerce a value into the correct type.

        Strings naming a preset on the type (e.g. 'BS3' for Crosslinker) resolve to the preset.

        :param value: (mixed) value to coerce
        :return: (mixed) coerced value
        """
        if isinstance(value, self.type):
            return value
        # nested groups validate themselves and report their own errors
        if isinstance(value, dict):
            return self.type(**value)
        try:
            if isinstance(value, str) and issubclass(self.type, ConfigGroup) and \
                    value in self.type.__dict__:
                return self.type.__dict__[value]
            else:
                return self.type(value)
        except ValueError:
            raise TypeError from None

    def hash(self, value):
        """
        Create a hash for a value.

        :param value: (mixed) value to create hash for
        :return: (int) hash of the value
        """
        if issubclass(self.type, ConfigGroup):
            return value.hash()
        elif issubclass(self.type, str):
            return stringhash(value)
        else:
            return hash(value)


class ListSetting(Setting):
    """A Setting with a list of values supported by the config system."""

    def accept(self, values):
        """
        Coerce and check all elements of the ListSetting.

        A single value is accepted as a list of one.

        :param values: (list) values to check
        :return: (list) coerced values
        """
        if not isinstance(values, list):
            values = [values]
        return [super(ListSetting, self).accept(value) for value in values]

    def hash(self, value):
        """
        Create a hash.

        :return: (int) hash
        """
        if issubclass(self.type, ConfigGroup):
            return hash(tuple(x.hash() for x in value))
        elif issubclass(self.type, str):
            return hash(tuple(stringhash(x) for x in value))
        else:
            return hash(tuple(value))


class ConfigMeta(type):
    """Metaclass used to define configuration groups."""

    def __new__(cls, name, bases, attributes):
        """Create a new instance."""
        settings = {k: a for k, a in attributes.items() if isinstance(a, Setting)}
        others = {k: a for k, a in attributes.items() if k not in settings}
        defaults = {k: s.default for k, s in settings.items() if hasattr(s, 'default')}
        required = set([k for k, s in settings.items() if s.required])
        new_attributes = dict(_settings=attributes, _defaults=defaults, _required=required,
                              **others)
        return type.__new__(cls, name, bases, new_attributes)


class ConfigGroup(metaclass=ConfigMeta):
    """Base class for configuration groups."""

    def __init__(self, **kwargs):
        """Initialise the ConfigGroup."""
        self._values = {}
        for key, value in kwargs.items():
            if key not in self._settings:
                raise KeyError("Unknown setting '%s'" % key)
            setattr(self, key, value)

        # transfer defaults to those values that are not set explicitly
        for k, v in self._defaults.items():
            if k not in kwargs.keys():
                setattr(self, k, copy.deepcopy(self._defaults[k]))

        for setting in self._required:
            if setting not in kwargs.keys():
                raise AttributeError("'%s' is required but not defined" % setting) from None

    def __setattr__(self, key, value):
        """Set the value of a Setting."""
        if key.startswith('_') or key not in self._settings:
            super(ConfigGroup, self).__setattr__(key, value)
            return
        setting = self._settings[key]
        try:
            self._values[key] = setting.accept(value)
        except TypeError:
            raise TypeError("Value '%s' is not valid for '%s' and could not be coerced "
                            "into the expected type (%s)" % (repr(value), key,
                                                             repr(setting.type))) from None
        except ValueError as e:
            raise ValueError("Value '%s' is not valid for '%s': %s"
                             % (repr(value), key, e)) from None

    def __contains__(self, key):
        """Check if a Setting is configured in the ConfigGroup."""
        return key in self._settings

    def __getattr__(self, key):
        """Get the value for a Setting."""
        if key.startswith('_') or key not in self._settings:
            raise AttributeError(key)
        elif key in self._values:
            return self._values[key]
        else:
            raise AttributeError(key)

    def __eq__(self, other):
        """Check if two ConfigGroups are equal."""
        if type(other) is type(self):
            return vars(self) == vars(other)
        return False

    def hash(self):
        """
        Create a hash.

        :return: (int) hash
        """
        value_hashes = [(stringhash(name), self._settings[name].hash(value))
                        for name, value in self._values.items()]
        return hash(frozenset(value_hashes))

    @classmethod
    def from_json(cls, json_string):
        """Create a ConfigGroup from a JSON string."""
        args = json.loads(json_string)
        return cls(**args)

    @classmethod
    def from_yaml(cls, yaml_string):
        """Create a ConfigGroup from a YAML string."""
        args = yaml.safe_load(yaml_string)
        return cls(**args)

    def to_dict(self, excl_defaults=True):
        """
        Convert the ConfigGroup to a dictionary.

        :param excl_defaults: (bool) exclude default values
        :return: (dict) dictionary representation of the ConfigGroup
        """
        values = {}
        for k, value in self._values.items():
            # convert ConfigGroups to dictionaries recursively
            if isinstance(value, ConfigGroup):
                value_tmp = value.to_dict(excl_defaults=excl_defaults)
            elif isinstance(value, list):
                value_tmp = [v.to_dict(excl_defaults=excl_defaults)
                             if isinstance(v, ConfigGroup) else v for v in value]
            else:
                value_tmp = value

            if value_tmp is None:
                continue
            # only keep if not default value (if set)
            if k not in self._defaults or not excl_defaults or self._defaults[k] != value:
                values[k] = value_tmp

        if len(values) == 0:
            return None
        return values

    def to_json(self, excl_defaults=True):
        """Convert the ConfigGroup to a JSON string."""
        return json.dumps(self.to_dict(excl_defaults=excl_defaults))

    def write(self, file_name, excl_defaults=True):
        """Write the ConfigGroup to a JSON file."""
        with open(file_name, "w") as outfile:
            json.dump(self.to_dict(excl_defaults=excl_defaults), outfile, indent='\t')

    def write_yaml(self, file_name, excl_defaults=True):
        """Write the ConfigGroup to a YAML file."""
        with open(file_name, "w") as outfile:
            yaml.dump(self.to_dict(excl_defaults=excl_defaults), outfile)


class ToleranceContainer():
    """Mixin class for ConfigGroups that contain ppm tolerances."""

    _re_ppm_tol = re.compile(r'^[\-\+]?[0-9]+(?:\.[0-9]+)?\s*(?:ppm)?$', re.IGNORECASE)

    def parse_ppm_tol(self, str_tol):
        """Parse a tolerance string like '20 ppm' or '20' into a float ppm value."""
        tol = re.match(r"\s*([\-\+]?[0-9.]+)", str_tol).group(1)
        return float(tol)


class Crosslinker(ConfigGroup):
    """Crosslinker configuration."""

    """Name"""
    name = Setting(str, valid_values=re.compile('^.{1,39}$'))

    """Mass added when the crosslinker bridges two residues"""
    linker_mass = Setting(float)

    """Mass added when the crosslinker is attached to one residue only (hydrolysed dead-end)"""
    dead_end_mass = Setting(float)

    """Residues the crosslinker reacts with; 'nterm' for the protein n-terminus"""
    specificity = ListSetting(str, ["K", "S", "T", "Y", "nterm"])

    """
    A peptide ending in this residue does not count it as a linkable site (digestion cleaves
    after it, so it can't be modified). Empty string disables trimming.
    """
    trimmed_residue = Setting(str, "K", valid_values=re.compile('^[A-Z]?$'))

    def __init__(self, **kwargs):
        """
        Initialise the Crosslinker.

        Splits the specificity into the reactive residues and the protein n-terminal flag.
        """
        super().__init__(**kwargs)
        self.nterm = "nterm" in self.specificity
        self.site_residues = frozenset(aa for aa in self.specificity if aa != "nterm")
        if any(len(aa) != 1 for aa in self.site_residues):
            raise ValueError("Crosslinker specificity must be single amino acids or 'nterm'")


Crosslinker.BS3 = Crosslinker(name='BS3',
                              linker_mass=const.LINKER_MASS,
                              dead_end_mass=const.DEAD_END_MASS,
                              specificity=["K", "S", "T", "Y", "nterm"])


class Enzyme(ConfigGroup):
    """Enzyme configuration."""

    """Name of the enzyme"""
    name = Setting(str)

    """regular expression rule for cleavage (a match ends at the cleavage site)"""
    rule = Setting(str, required=False)

    """enzyme cleaves c-terminal of these amino-acids"""
    cterminal_of = ListSetting(str, [])

    """enzyme does not cleave if the following amino-acid is one of these"""
    restraining = ListSetting(str, [])

    def __init__(self, **kwargs):
        """Turn cterminal_of and restraining into a regex rule."""
        super().__init__(**kwargs)
        if 'rule' in self._values:
            if len(self.cterminal_of) > 0:
                raise ValueError("Can't handle definition of a rule and separate definitions of "
                                 "digested amino-acids")
            return

        if len(self.cterminal_of) == 0:
            raise ValueError("Enzyme needs either a rule or cterminal_of amino-acids")

        rule = '(' + '|'.join(self.cterminal_of) + ')'
        if len(self.restraining) > 0:
            rule += '(?!' + '|'.join(self.restraining) + ')'
        self._values['rule'] = rule

    def to_dict(self, excl_defaults=True):
        if len(self.cterminal_of) > 0:
            return {key: self._values[key] for key in ['name', 'cterminal_of', 'restraining']}
        else:
            return {key: self._values[key] for key in ['name', 'rule']}


Enzyme.trypsin = Enzyme(name='trypsin',
                        cterminal_of=['K', 'R'], restraining=['P'])


class DigestionConfig(ConfigGroup):
    """Digestion configuration."""

    def __init__(self, **kwargs):
        """Initialise the DigestionConfig."""
        super().__init__(**kwargs)
        if self.min_peptide_length > self.max_peptide_length:
            raise ValueError("min_peptide_length must not exceed max_peptide_length!")

    """Digestion enzyme in use"""
    enzyme = Setting(Enzyme, Enzyme.trypsin)

    """
    Cleavage rule specificity:
        full - both termini follow the enzyme rule
        partial - fully and semi-specific peptides (at least one terminus follows the rule)
        none - every sub-sequence of the protein
    """
    specificity = Setting(str, 'full', valid_values=('full', 'partial', 'none'))

    """Number of missed cleavages permitted"""
    missed_cleavages = Setting(int, 1, min_value=0)

    """Minimum peptide length filter."""
    min_peptide_length = Setting(int, 4, min_value=1)

    """Maximum peptide length filter."""
    max_peptide_length = Setting(int, 60, min_value=1)


class IsotopeLabelConfig(ConfigGroup):
    """
    Isotope labelling of the heavy peptides.

    The mass shift of a peptide is the number of its carbons times the 13C-12C mass difference
    (if use_c13), plus the number of its nitrogens times the 15N-14N mass difference (if
    use_n15), plus static_delta_mass.
    """

    """Peptides are labelled with 13C"""
    use_c13 = Setting(bool, True)

    """Peptides are labelled with 15N"""
    use_n15 = Setting(bool, True)

    """Constant mass shift added on top of the labels"""
    static_delta_mass = Setting(float, 0.0)

    def __init__(self, **kwargs):
        """Initialise the IsotopeLabelConfig and reject settings that would not shift at all."""
        super().__init__(**kwargs)
        if not self.use_c13 and not self.use_n15 and \
                abs(self.static_delta_mass) <= sys.float_info.epsilon:
            raise ValueError("Either a 13C or 15N label or a static delta mass needs to be "
                             "defined!")

    @property
    def has_static_delta(self):
        return abs(self.static_delta_mass) > sys.float_info.epsilon


class IsotopeDetectorConfig(ConfigGroup):
    """Isotopic profile detection configuration."""

    """Tolerance in ppm for matching isotope peaks (defaults to the ms1 tolerance)."""
    tolerance = Setting(float, -1)

    """Spacing between isotope peaks in Dalton"""
    isotope_spacing = Setting(float, const.ISOTOPE_SPACING)

    """Number of theoretical isotope peaks on each side of the monoisotopic peak"""
    satellite_peaks = Setting(int, const.SATELLITE_PEAKS, min_value=1, max_value=4)


class FastaReaderConfig(ConfigGroup):
    """FastaReader configuration."""

    """Regular expression used for matching protein accession"""
    re_accession = Setting(str, "(?:sp|tr)\\|([\\w-]+)\\|.*")


class Config(ConfigGroup, ToleranceContainer):
    """Top level configuration for a search."""

    def __init__(self, **kwargs):
        """
        Initialise the Config.

        Forwards all kwargs to super().__init__ and translates the tolerance string.
        """
        super().__init__(**kwargs)

        self.ms1_ppm = self.parse_ppm_tol(self.ms1_tol)
        if self.ms1_ppm <= 0:
            raise ValueError("MS1 tolerance must be set to a positive value!")

        # if isotope tolerance is not explicitly set use the ms1 tolerance
        if self.isotope_config.tolerance < 0:
            self.isotope_config.tolerance = self.ms1_ppm

    def to_dict(self, excl_defaults=True):
        values = super().to_dict(excl_defaults=excl_defaults)

        if excl_defaults and 'isotope_config' in values and \
                self.isotope_config.tolerance == self.ms1_ppm:
            del values['isotope_config']['tolerance']
            if len(values['isotope_config']) == 0:
                del values['isotope_config']

        return values

    """
    Number of processes to use for the search. Setting to 0 means using the
    multiprocessing default, which is the value of `cpu_count`. Setting it to a negative
    number N means use all but minus N processes.
    """
    threads = Setting(int, 1)

    """Tolerance (ppm) for matching feature masses."""
    ms1_tol = Setting(str, valid_values=ToleranceContainer._re_ppm_tol)

    """Crosslinker in use"""
    crosslinker = Setting(Crosslinker, Crosslinker.BS3)

    """Fasta reader config"""
    fasta = Setting(FastaReaderConfig, FastaReaderConfig())

    """Digestion config"""
    digestion = Setting(DigestionConfig, DigestionConfig())

    """Isotope labelling config"""
    labeling = Setting(IsotopeLabelConfig, IsotopeLabelConfig())

    """Isotopic profile detector config"""
    isotope_config = Setting(IsotopeDetectorConfig, IsotopeDetectorConfig())


class ConfigReader:
    """Config Reader class."""

    @classmethod
    def load_settings(cls, file_name):
        """Read the raw settings dictionary from a JSON or YAML file."""
        with open(file_name) as f:
            if file_name.lower().endswith('.json'):
                settings = json.load(f)
            elif file_name.lower().endswith('.yaml') or file_name.lower().endswith('.yml'):
                settings = yaml.safe_load(f)
            else:
                # Guess format
                try:
                    settings = json.load(f)
                except json.JSONDecodeError:
                    f.seek(0)
                    settings = yaml.safe_load(f)
        return {} if settings is None else settings

    @classmethod
    def load_file(cls, file_name):
        """Open a file by filename and create a Config from it."""
        return Config(**cls.load_settings(file_name))

    @classmethod
    def load_json(cls, file_obj):
        """Create a Config from a JSON file."""
        settings = json.load(file_obj)
        return Config(**settings)

    @classmethod
    def load_yaml(cls, file_obj):
        """Create a Config from a YAML file."""
        settings = yaml.safe_load(file_obj)
        return Config(**settings)

    @classmethod
    def loads_json(cls, s):
        """Create a Config from a JSON string."""
        settings = json.loads(s)
        return Config(**settings)

    @classmethod
    def loads_yaml(cls, s):
        """Create a Config from a YAML string."""
        settings = yaml.safe_load(s)
        return Config(**settings)
