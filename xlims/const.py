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

"""Module providing physical constants and calibrated crosslinker masses."""
import sys


class _const:
    # xlims version
    VERSION = "1.0.0"

    PROTON_MASS = 1.00727649

    CARBON_12_MASS = 12.0
    CARBON_13_MASS = 13.00335484
    NITROGEN_14_MASS = 14.00307401
    NITROGEN_15_MASS = 15.00010897

    # mass added by a BS3 linker bridging two sites
    LINKER_MASS = 138.068070650101
    # mass added by a hydrolysed BS3 hanging off a single site
    DEAD_END_MASS = 156.078630924225
    # heme group carried by the J residue
    HEME_MASS = 615.169432626017

    PPM_DIVISOR = 1000000

    # distance between neighbouring isotope peaks (in Dalton, divide by charge for m/z)
    ISOTOPE_SPACING = 1.003
    # number of isotope peaks on either side of the monoisotopic peak in a theoretical envelope
    SATELLITE_PEAKS = 3

    # as const is overwriten by _const the module __file__ variable would disapear.
    # so it is also saved into the class _const
    __file__ = __file__

    class ConstError(TypeError):
        pass

    # overwrite the __setattr__ method to raise an error if a variable is overwritten
    def __setattr__(self, name, value):
        if name in self.__dict__ or name in self.__class__.__dict__:
            raise self.ConstError("Can't rebind const(%s)" % name)
        self.__dict__[name] = value


# overwrite the module const with the class _const so that we can actually protect attributes
# from being changed
sys.modules[__name__] = _const()
