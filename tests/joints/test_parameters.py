# Copyright 2022 The CJT Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""tests.joints.test_parameters"""
import numpy as np
import pytest

from cjt.joints import JointRegistry
from cjt.joints import PARAMETERS
from cjt.joints import make_joint
from cjt.utils.testing import LEMON_PARAMS
from cjt.utils.testing import TorsionJoint


@pytest.mark.parametrize("name", sorted(PARAMETERS))
def test_override(name):
    """Every parameter can be set by keyword"""
    joint = make_joint("TorsionJoint", LEMON_PARAMS, **{name: 42.0})

    assert getattr(joint, name) == 42.0


@pytest.mark.parametrize("name", sorted(PARAMETERS))
def test_catalogue(name):
    """Every parameter has a unit and a description"""
    unit, description = PARAMETERS[name]

    assert unit
    assert description


def test_registry():
    """Concrete joints register themselves by class name"""
    assert JointRegistry["TorsionJoint"] is TorsionJoint


@pytest.mark.parametrize("ts", [1e-4, 1e-3, 1e-2])
@pytest.mark.parametrize("method", ["tustin", "zoh", "backward_diff"])
def test_discrete_poles_stable(ts, method):
    """Discretized poles stay in the closed unit disc"""
    joint = TorsionJoint.from_params(LEMON_PARAMS)
    sysd = joint.get_state_space_d(ts=ts, method=method)

    assert sysd.dt == ts
    assert sysd.A.shape == (4, 4)
    assert np.all(np.abs(sysd.poles()) <= 1.0 + 1e-9)


@pytest.mark.parametrize("value", ["", None, [1.0]])
def test_bad_names(value):
    """Unknown joint names"""
    with pytest.raises((ValueError, TypeError)):
        make_joint(value)
