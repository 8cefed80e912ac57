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

"""Discrete time linear joint dynamics."""
from absl import logging
import jax
import jax.numpy as jnp

from cjt.core import Env
from cjt.core import Obj
from cjt.core import field
from cjt.joints.core import GenericJoint

# Stiff joints (torsion bar modes near the Nyquist rate) need double precision.
jax.config.update("jax_enable_x64", True)


class JointEnvState(Obj):
  """JointEnvState."""
  arr: jnp.ndarray = field(jaxed=True)
  h: int = field(0, jaxed=True)


class JointEnv(Env):
  """Steps the discretized linear dynamics of a joint.

  Use `JointEnv.create(joint=...)`. The sampling time defaults to the joint's
  `Ts`. Outputs follow `y[k] = C x[k] + D u[k]`; stepping is done in double
  precision.
  """
  joint: GenericJoint = field(jaxed=False)
  ts: float = field(None, jaxed=False)
  method: str = field("tustin", jaxed=False)
  A: jnp.ndarray = field(jaxed=False)
  B: jnp.ndarray = field(jaxed=False)
  C: jnp.ndarray = field(jaxed=False)
  D: jnp.ndarray = field(jaxed=False)

  def setup(self):
    if self.joint is None:
      raise ValueError("JointEnv requires a joint.")
    if self.joint.is_symbolic:
      raise NotImplementedError("Cannot simulate a symbolic joint.")

    sys = self.joint.get_state_space_d(ts=self.ts, method=self.method)
    self.ts = sys.dt
    self.A = jnp.asarray(sys.A, dtype=jnp.float64)
    self.B = jnp.asarray(sys.B, dtype=jnp.float64)
    self.C = jnp.asarray(sys.C, dtype=jnp.float64)
    self.D = jnp.asarray(sys.D, dtype=jnp.float64)
    logging.debug("JointEnv for %s: %d states, ts=%g.",
                  type(self.joint).__name__, self.A.shape[0], self.ts)

  @property
  def state_size(self) -> int:
    return self.A.shape[0]

  @property
  def action_size(self) -> int:
    return self.B.shape[1]

  def init(self, x0=None):
    """init.

    Args:
      x0: initial state, zeros if `None`.

    Returns:
      The initial state and the unforced output.
    """
    arr = (jnp.zeros((self.state_size,), dtype=jnp.float64)
           if x0 is None else jnp.asarray(x0, dtype=jnp.float64))
    if arr.shape != (self.state_size,):
      raise ValueError(
          f"x0 must have shape {(self.state_size,)}, got {arr.shape}.")
    state = JointEnvState(arr=arr, h=jnp.asarray(0))
    return state, self.C @ arr

  def __call__(self, state, action):
    """__call__.

    Args:
      state: current `JointEnvState`.
      action: input vector (or scalar for single input joints).

    Returns:
      The next state `x[k + 1] = A x[k] + B u[k]` and the output at the
      current step, `y[k] = C x[k] + D u[k]`. The output therefore lags the
      returned state by one step, as in `scipy.signal.dlsim`.
    """
    u = jnp.atleast_1d(jnp.asarray(action, dtype=jnp.float64))
    y = self.C @ state.arr + self.D @ u
    arr = self.A @ state.arr + self.B @ u
    return JointEnvState(arr=arr, h=state.h + 1), y

  def rollout(self, actions, x0=None):
    """Applies a sequence of actions.

    Args:
      actions: array of shape `(T,)` or `(T, action_size)`.
      x0: initial state, zeros if `None`.

    Returns:
      The final state and the outputs, shape `(T, n_outputs)`.
    """
    actions = jnp.asarray(actions, dtype=jnp.float64)
    actions = actions.reshape((-1, self.action_size))
    state, _ = self.init(x0)

    def step(state, u):
      return self(state, u)

    return jax.lax.scan(step, state, actions)
