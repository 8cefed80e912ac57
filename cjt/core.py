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

"""cjt.core.

Joints, linear systems and environments are all `Obj`s: flax dataclasses that
are mutable while `setup` runs and frozen afterwards. Derived objects are made
with `replace`, never by assignment.
"""
import dataclasses
from abc import abstractmethod
from typing import Any, Dict, Generic, Tuple, TypeVar

import flax.struct
import jax

# Type variable for observation type
T = TypeVar('T')


def field(default=None, jaxed=True, **kwargs):
  """Dataclass field; `jaxed` fields are pytree leaves, others metadata."""
  if "default_factory" not in kwargs:
    kwargs["default"] = default
  kwargs["pytree_node"] = jaxed
  return flax.struct.field(**kwargs)


class Obj:

  def freeze(self):
    object.__setattr__(self, "__frozen__", True)

  def unfreeze(self):
    object.__setattr__(self, "__frozen__", False)

  def is_frozen(self):
    return not hasattr(self, "__frozen__") or getattr(self, "__frozen__")

  def __new__(cls, *args, **kwargs):
    """Allows assignment until `freeze` is called."""

    def __setattr__(self, name, value):
      if self.is_frozen():
        raise dataclasses.FrozenInstanceError(
            f"cannot assign to field '{name}' of a frozen "
            f"{type(self).__name__}")
      object.__setattr__(self, name, value)

    def replace(self, **updates):
      obj = dataclasses.replace(self, **updates)
      obj.freeze()
      return obj

    cls.__setattr__ = __setattr__
    cls.replace = replace

    obj = object.__new__(cls)
    obj.unfreeze()

    return obj

  @classmethod
  def __init_subclass__(cls, *args, **kwargs):
    super().__init_subclass__(*args, **kwargs)
    flax.struct.dataclass(cls)

  @classmethod
  def create(cls, *args, **kwargs):
    obj = cls(*args, **kwargs)
    obj.setup()
    obj.freeze()

    return obj

  @classmethod
  def field_names(cls) -> Tuple[str, ...]:
    return tuple(f.name for f in dataclasses.fields(cls))

  def to_dict(self) -> Dict[str, Any]:
    """Shallow field name to value mapping."""
    return {k: getattr(self, k) for k in self.field_names()}

  def setup(self):
    """Derives fields from the constructor arguments, runs before freezing"""

  def flatten(self):
    """Pytree leaves, i.e. the values of the `jaxed` fields"""
    return jax.tree_util.tree_flatten(self)[0]

  @classmethod
  def unflatten(cls, treedef, leaves):
    """Rebuilds an object from `flatten` leaves and its treedef"""
    return jax.tree_util.tree_unflatten(treedef, leaves)


class Env(Obj, Generic[T]):

  @abstractmethod
  def init(self, *args, **kwargs) -> Tuple[Any, T]:
    """Return an initial state and observation"""

  @abstractmethod
  def __call__(self, state, action, *args, **kwargs) -> Tuple[Any, T]:
    """Return the next state and the observation for the input action"""

  @property
  @abstractmethod
  def state_size(self) -> int:
    """Return the size of the state"""

  @property
  @abstractmethod
  def action_size(self) -> int:
    """Return the size of the action space"""
