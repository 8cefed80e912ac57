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

"""Tests for cjt.core."""

import dataclasses

from absl.testing import absltest
import chex
from cjt.core import Obj
from cjt.core import field
import jax
import jax.numpy as jnp


class Gains(Obj):
  kp: float = field(1.0, jaxed=False)
  kd: float = field(0.1, jaxed=False)
  ratio: float = field(jaxed=False)
  arr: jnp.ndarray = field(jaxed=True)

  def setup(self):
    self.ratio = self.kd / self.kp
    if self.arr is None:
      self.arr = jnp.zeros(2)


class ObjTest(chex.TestCase):

  def test_create_runs_setup(self):
    gains = Gains.create(kp=2.0, kd=1.0)
    self.assertEqual(gains.ratio, 0.5)
    chex.assert_shape(gains.arr, (2,))

  def test_frozen_after_create(self):
    gains = Gains.create()
    self.assertTrue(gains.is_frozen())
    with self.assertRaises(dataclasses.FrozenInstanceError):
      gains.kp = 3.0

  def test_replace(self):
    gains = Gains.create()
    other = gains.replace(kp=4.0)
    self.assertEqual(other.kp, 4.0)
    self.assertEqual(gains.kp, 1.0)
    self.assertTrue(other.is_frozen())

  def test_to_dict(self):
    gains = Gains.create(kp=2.0)
    self.assertEqual(Gains.field_names(), ("kp", "kd", "ratio", "arr"))
    self.assertEqual(gains.to_dict()["ratio"], 0.05)

  def test_flatten(self):
    gains = Gains.create(arr=jnp.ones(3))
    leaves = gains.flatten()
    self.assertLen(leaves, 1)
    chex.assert_trees_all_close(leaves[0], jnp.ones(3))

  def test_unflatten(self):
    gains = Gains.create(kp=2.0, arr=jnp.ones(3))
    treedef = jax.tree_util.tree_structure(gains)
    other = Gains.unflatten(treedef, [2 * leaf for leaf in gains.flatten()])
    self.assertIsInstance(other, Gains)
    self.assertEqual(other.kp, 2.0)
    self.assertEqual(other.ratio, 0.05)
    chex.assert_trees_all_close(other.arr, 2 * jnp.ones(3))


if __name__ == '__main__':
  absltest.main()
