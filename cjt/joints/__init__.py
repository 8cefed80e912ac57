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

from cjt.joints.core import DESCRIPTORS
from cjt.joints.core import FLAGS
from cjt.joints.core import GenericJoint
from cjt.joints.core import JointRegistry
from cjt.joints.core import PARAMETERS
from cjt.joints.core import make_joint

__all__ = [
    "DESCRIPTORS",
    "FLAGS",
    "GenericJoint",
    "JointRegistry",
    "PARAMETERS",
    "make_joint",
]
