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

"""Generic compliant joint.

`GenericJoint` holds the parameters of a compliant actuator and derives the
linear representations of its dynamics. Concrete joint models subclass it and
provide `get_dynamics_matrices` and `get_nonlinear_dynamics`.

Inertiae, damping and stiffness are reflected to the link side.
"""
import abc
import inspect
from typing import Any, Dict, Mapping, Optional

from absl import logging
import numpy as np
import sympy

from cjt import systems
from cjt.core import Obj
from cjt.core import field

JointRegistry = {}

# name: (unit, description)
PARAMETERS = {
    # Inertiae
    "m": ("kg", "Actuator mass"),
    "I_m": ("kg m^2", "Motor rotor inertia"),
    "I_g": ("kg m^2", "Motor-side gear inertia"),
    "I_b": ("kg m^2", "Torsion bar inertia"),
    # Stiffnesses
    "k_g": ("Nm/rad", "Gearbox stiffness"),
    "k_b": ("Nm/rad", "Torsion bar stiffness"),
    # Linear viscous friction
    "d_m": ("Nms/rad", "Motor damping"),
    "d_g": ("Nms/rad", "Gearbox damping"),
    "d_b": ("Nms/rad", "Torsion bar damping"),
    # Asymmetric viscous friction
    "d_m_n": ("Nms/rad", "Motor damping, negative direction"),
    "d_g_n": ("Nms/rad", "Gearbox damping, negative direction"),
    "d_b_n": ("Nms/rad", "Torsion bar damping, negative direction"),
    # Linear internal viscous friction
    "d_mg": ("Nms/rad", "Gearbox internal damping"),
    "d_gb": ("Nms/rad", "Torsion bar internal damping"),
    # Coulomb friction
    "d_cm": ("Nm", "Motor Coulomb damping"),
    "d_cg": ("Nm", "Gearbox Coulomb damping"),
    "d_cb": ("Nm", "Torsion bar Coulomb damping"),
    # Asymmetric Coulomb friction
    "d_cm_n": ("Nm", "Motor Coulomb damping, negative direction"),
    "d_cg_n": ("Nm", "Gearbox Coulomb damping, negative direction"),
    "d_cb_n": ("Nm", "Torsion bar Coulomb damping, negative direction"),
    # Cogging
    "cog_a1": ("Nm", "Cogging cosine amplitude"),
    "cog_a2": ("Nm", "Cogging sine amplitude"),
    "cog_f": ("periods/rev", "Cogging spatial frequency"),
    # Misc
    "n": ("-", "Gear ratio"),
    "k_t": ("Nm/A", "Torque constant"),
    "r": ("Ohm", "Armature resistance at normal ambient temperature"),
    "x": ("H", "Armature inductance"),
    "Ts": ("s", "Sampling time"),
    # Operating/max conditions
    "v_0": ("V", "Operating voltage"),
    "i_c": ("A", "Max. continuous current"),
    "i_p": ("A", "Peak current"),
    "dq_c": ("rad/s", "Max. continuous speed (output)"),
    "dq_p": ("rad/s", "Max. peak speed (output)"),
    # Thermal parameters
    "r_th1": ("K/W", "Thermal resistance windings to housing"),
    "r_th2": ("K/W", "Thermal resistance housing to air"),
    "T_thw": ("s", "Thermal time constant of the windings"),
    "T_thm": ("s", "Thermal time constant of the motor"),
    "Tmp_WMax": ("degC", "Maximum armature temperature"),
    "Tmp_AMax": ("degC", "Maximum ambient temperature"),
    "Tmp_AMin": ("degC", "Minimum ambient temperature"),
    "Tmp_ANom": ("degC", "Normal ambient temperature"),
}

FLAGS = ("verbose", "debug")
DESCRIPTORS = ("name", "param_name", "model_name", "nonlinear_model_name")


def make_joint(cls, params: Optional[Mapping[str, Any]] = None, **kwargs):
  """Instantiates the registered joint class named `cls`.

  Args:
    cls: class name of a concrete `GenericJoint` subclass.
    params: parameter mapping, see `GenericJoint.from_params`.
    **kwargs: parameters taking precedence over `params`.

  Returns:
    The joint.
  """
  if cls not in JointRegistry:
    raise ValueError(f"Joint `{cls}` not found.")
  joint_cls = JointRegistry[cls]
  if inspect.isabstract(joint_cls):
    raise ValueError(f"Joint `{cls}` is abstract.")
  return joint_cls.from_params(params or {}, **kwargs)


class GenericJoint(Obj, metaclass=abc.ABCMeta):
  """Abstract base class of compliant joint models.

  Only subclasses implementing `get_dynamics_matrices` and
  `get_nonlinear_dynamics` can be instantiated.
  """
  verbose: bool = field(False, jaxed=False)
  debug: bool = field(False, jaxed=False)

  # Inertiae
  m: float = field(0.0, jaxed=False)
  I_m: float = field(0.0, jaxed=False)
  I_g: float = field(0.0, jaxed=False)
  I_b: float = field(0.0, jaxed=False)
  # Stiffnesses
  k_g: float = field(0.0, jaxed=False)
  k_b: float = field(0.0, jaxed=False)
  # Linear viscous friction
  d_m: float = field(0.0, jaxed=False)
  d_g: float = field(0.0, jaxed=False)
  d_b: float = field(0.0, jaxed=False)
  # Asymmetric viscous friction
  d_m_n: float = field(0.0, jaxed=False)
  d_g_n: float = field(0.0, jaxed=False)
  d_b_n: float = field(0.0, jaxed=False)
  # Linear internal viscous friction
  d_mg: float = field(0.0, jaxed=False)
  d_gb: float = field(0.0, jaxed=False)
  # Coulomb friction
  d_cm: float = field(0.0, jaxed=False)
  d_cg: float = field(0.0, jaxed=False)
  d_cb: float = field(0.0, jaxed=False)
  # Asymmetric Coulomb friction
  d_cm_n: float = field(0.0, jaxed=False)
  d_cg_n: float = field(0.0, jaxed=False)
  d_cb_n: float = field(0.0, jaxed=False)
  # Cogging
  cog_a1: float = field(0.0, jaxed=False)
  cog_a2: float = field(0.0, jaxed=False)
  cog_f: float = field(0.0, jaxed=False)
  # Misc
  n: float = field(1.0, jaxed=False)
  k_t: float = field(0.0, jaxed=False)
  r: float = field(0.0, jaxed=False)
  x: float = field(0.0, jaxed=False)
  Ts: float = field(1e-3, jaxed=False)
  # Operating/max conditions
  v_0: float = field(0.0, jaxed=False)
  i_c: float = field(0.0, jaxed=False)
  i_p: float = field(0.0, jaxed=False)
  dq_c: float = field(0.0, jaxed=False)
  dq_p: float = field(0.0, jaxed=False)
  # Thermal parameters
  r_th1: float = field(0.0, jaxed=False)
  r_th2: float = field(0.0, jaxed=False)
  T_thw: float = field(0.0, jaxed=False)
  T_thm: float = field(0.0, jaxed=False)
  Tmp_WMax: float = field(0.0, jaxed=False)
  Tmp_AMax: float = field(0.0, jaxed=False)
  Tmp_AMin: float = field(0.0, jaxed=False)
  Tmp_ANom: float = field(25.0, jaxed=False)

  # Descriptive properties
  name: str = field("", jaxed=False)
  param_name: str = field("", jaxed=False)
  model_name: str = field("", jaxed=False)
  nonlinear_model_name: str = field("", jaxed=False)

  @classmethod
  def __init_subclass__(cls, *args, **kwargs):
    """Adds every subclass to the registry, see `make_joint`."""
    super().__init_subclass__(*args, **kwargs)
    JointRegistry[cls.__name__] = cls

  @classmethod
  def from_params(cls, params: Mapping[str, Any], **overrides):
    """Builds a joint from a parameter mapping.

    Args:
      params: maps parameter, flag and descriptor names to values. Keys that
        are not joint fields are ignored.
      **overrides: values taking precedence over `params`.

    Returns:
      The joint, frozen.
    """
    names = set(cls.field_names())
    values = dict(params)
    values.update(overrides)

    ignored = sorted(set(values) - names)
    if ignored:
      logging.warning("Ignoring unknown parameters for %s: %s", cls.__name__,
                      ", ".join(ignored))

    return cls.create(**{k: v for k, v in values.items() if k in names})

  def get_params(self) -> Dict[str, Any]:
    """Returns all parameters, flags and descriptors of the joint."""
    return self.to_dict()

  @property
  def is_symbolic(self) -> bool:
    return any(systems.is_symbolic(getattr(self, k)) for k in PARAMETERS)

  def matrix(self, rows):
    """Builds a matrix from nested rows, symbolic if the joint is."""
    if self.is_symbolic:
      return sympy.Matrix(rows)
    return np.array(rows, dtype=np.float64)

  def get_state_space(self) -> systems.StateSpace:
    """Continuous time state space representation of the linear dynamics."""
    A, B, C, _, _, _ = self.get_dynamics_matrices()
    sys = systems.state_space(A, B, C, 0)
    if self.verbose:
      logging.info("%s: %d-state continuous state space (%d in, %d out).",
                   self._label(), sys.n_states, sys.n_inputs, sys.n_outputs)
    if self.debug:
      logging.debug("%s: A=%s B=%s C=%s", self._label(), sys.A, sys.B, sys.C)
    return sys

  def get_state_space_d(self,
                        ts: Optional[float] = None,
                        method: str = "tustin") -> systems.StateSpace:
    """Discrete time state space representation of the linear dynamics.

    Discretizes `get_state_space()`.

    Args:
      ts: sampling time, defaults to the joint's `Ts`.
      method: discretization method, see `systems.DISCRETIZATION_METHODS`.

    Returns:
      The discrete time state space model.
    """
    ts = self.Ts if ts is None else ts
    sys = systems.c2d(self.get_state_space(), ts, method=method)
    if self.verbose:
      logging.info("%s: discretized with ts=%g (%s).", self._label(), ts,
                   method)
    return sys

  def get_tf(self):
    """Continuous time transfer function of the linear dynamics."""
    return systems.ss2tf(self.get_state_space())

  def get_tf_d(self, ts: Optional[float] = None, method: str = "tustin"):
    """Discrete time transfer function, see `get_state_space_d`."""
    return systems.ss2tf(self.get_state_space_d(ts=ts, method=method))

  def make_sym(self):
    """Returns a copy with every physical parameter a real `sympy.Symbol`.

    Flags and descriptors keep their values.
    """
    joint = self.replace(
        **{k: sympy.Symbol(k, real=True) for k in PARAMETERS})
    if self.verbose:
      logging.info("%s: made %d parameters symbolic.", self._label(),
                   len(PARAMETERS))
    return joint

  def _label(self) -> str:
    return self.name or type(self).__name__

  @abc.abstractmethod
  def get_dynamics_matrices(self):
    """Dynamics matrices of the linear dynamics.

    Returns:
      A tuple `(A, B, C, I, D, K)` of the continuous time system, input and
      output matrices and the inertia, damping and stiffness matrices.
    """

  @abc.abstractmethod
  def get_nonlinear_dynamics(self, x, dx):
    """Generalized torques due to the nonlinear dynamics.

    Args:
      x: position variables.
      dx: temporal derivative of the position variables.

    Returns:
      The generalized torques.
    """
