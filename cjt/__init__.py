# Copyright 2022 The CJT Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""cjt."""

from cjt import envs
from cjt import joints
from cjt import systems
from cjt.core import Env
from cjt.core import Obj
from cjt.core import field
from cjt.joints import GenericJoint
from cjt.joints import make_joint
from cjt.systems import StateSpace
from cjt.systems import TransferFunction

__all__ = (
    'envs',
    'joints',
    'systems',
    'Env',
    'Obj',
    'field',
    'GenericJoint',
    'make_joint',
    'StateSpace',
    'TransferFunction',
)
