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

"""Linear system representations.

NOTES
- Numeric systems hold float64 `numpy` arrays since they are handed to
  `scipy.signal` for discretization and transfer function conversion.
- Symbolic systems hold `sympy.Matrix` objects. They can be converted to a
  continuous time transfer function but not discretized.
"""
from typing import List, Optional, Union

from absl import logging
import numpy as np
import scipy.signal
import sympy

from cjt.core import Obj
from cjt.core import field

# Discretization methods understood by `c2d`, mapped to `scipy.signal` names.
DISCRETIZATION_METHODS = {
    "tustin": "bilinear",
    "bilinear": "bilinear",
    "zoh": "zoh",
    "foh": "foh",
    "euler": "euler",
    "backward_diff": "backward_diff",
    "impulse": "impulse",
}


def is_symbolic(value) -> bool:
  """True for sympy objects and (nested) sequences containing them."""
  if isinstance(value, (sympy.Basic, sympy.MatrixBase)):
    return True
  if isinstance(value, (list, tuple)):
    return any(is_symbolic(v) for v in value)
  return False


def _is_scalar_zero(value) -> bool:
  if isinstance(value, sympy.Expr):
    return bool(value.is_zero)
  return bool(np.isscalar(value) and value == 0)


class StateSpace(Obj):
  """State space model `dx = A x + B u`, `y = C x + D u`.

  `dt` is `None` for continuous time systems and the sampling time in seconds
  for discrete time systems.
  """
  A: np.ndarray = field(jaxed=False)
  B: np.ndarray = field(jaxed=False)
  C: np.ndarray = field(jaxed=False)
  D: np.ndarray = field(jaxed=False)
  dt: Optional[float] = field(None, jaxed=False)

  @property
  def n_states(self) -> int:
    return self.A.shape[0]

  @property
  def n_inputs(self) -> int:
    return self.B.shape[1]

  @property
  def n_outputs(self) -> int:
    return self.C.shape[0]

  @property
  def is_discrete(self) -> bool:
    return self.dt is not None

  @property
  def is_symbolic(self) -> bool:
    return isinstance(self.A, sympy.MatrixBase)

  def poles(self) -> np.ndarray:
    if self.is_symbolic:
      raise NotImplementedError("poles of a symbolic system are not supported")
    return np.linalg.eigvals(self.A)


class TransferFunction(Obj):
  """Transfer function in descending powers of `variable`.

  Numeric transfer functions describe a single input channel: `num` has one
  row of coefficients per output and `den` is the common denominator.
  Symbolic transfer functions cover all channels at once: `num` is a
  `sympy.Matrix` of shape `(n_outputs, n_inputs)` and `den` the characteristic
  polynomial, both expressions in `variable`.
  """
  num: np.ndarray = field(jaxed=False)
  den: np.ndarray = field(jaxed=False)
  dt: Optional[float] = field(None, jaxed=False)
  variable: Optional[sympy.Symbol] = field(None, jaxed=False)

  @property
  def is_discrete(self) -> bool:
    return self.dt is not None

  @property
  def is_symbolic(self) -> bool:
    return isinstance(self.num, sympy.MatrixBase)

  def evaluate(self, x):
    """Evaluates the response of every output at the (complex) point `x`."""
    if self.is_symbolic:
      return self.num.subs(self.variable, x) / self.den.subs(self.variable, x)
    num = np.atleast_2d(self.num)
    return np.array([np.polyval(row, x) for row in num]) / np.polyval(
        self.den, x)

  def to_expr(self) -> sympy.Matrix:
    """Returns the symbolic transfer matrix with cancelled common factors."""
    if not self.is_symbolic:
      raise ValueError("to_expr is only available for symbolic transfer "
                       "functions")
    return (self.num / self.den).applyfunc(sympy.cancel)


def state_space(A, B, C, D=None, dt=None) -> StateSpace:
  """Builds a validated `StateSpace`.

  Args:
    A: system matrix, `(n, n)`.
    B: input matrix, `(n, m)`.
    C: output matrix, `(p, n)`.
    D: feedthrough matrix, `(p, m)`. `None` or a scalar zero yields zeros.
    dt: sampling time for discrete time systems, `None` otherwise.

  Returns:
    The state space model.
  """
  symbolic = any(is_symbolic(M) for M in (A, B, C))
  if symbolic:
    A, B, C = sympy.Matrix(A), sympy.Matrix(B), sympy.Matrix(C)
  else:
    A, B, C = (np.atleast_2d(np.asarray(M, dtype=np.float64))
               for M in (A, B, C))

  n, m, p = A.shape[0], B.shape[1], C.shape[0]
  if A.shape != (n, n):
    raise ValueError(f"A must be square, got shape {A.shape}.")
  if B.shape[0] != n:
    raise ValueError(f"B must have {n} rows, got shape {B.shape}.")
  if C.shape[1] != n:
    raise ValueError(f"C must have {n} columns, got shape {C.shape}.")

  if D is None or _is_scalar_zero(D):
    D = sympy.zeros(p, m) if symbolic else np.zeros((p, m))
  elif symbolic:
    D = sympy.Matrix(D)
  else:
    D = np.atleast_2d(np.asarray(D, dtype=np.float64))
  if tuple(D.shape) != (p, m):
    raise ValueError(f"D must have shape {(p, m)}, got shape {D.shape}.")

  if dt is not None and dt <= 0:
    raise ValueError(f"Sampling time must be positive, got {dt}.")

  return StateSpace(A=A, B=B, C=C, D=D, dt=dt)


def c2d(sys: StateSpace, ts: float, method: str = "tustin") -> StateSpace:
  """Discretizes a continuous time system with sampling time `ts`."""
  if sys.is_symbolic:
    raise NotImplementedError(
        "Discretization of symbolic systems is not supported.")
  if sys.is_discrete:
    raise ValueError("System is already discrete.")
  if ts is None or ts <= 0:
    raise ValueError(f"Sampling time must be positive, got {ts}.")
  if method not in DISCRETIZATION_METHODS:
    raise ValueError(f"Unknown discretization method `{method}`, expected one "
                     f"of {sorted(DISCRETIZATION_METHODS)}.")

  logging.debug("Discretizing %d-state system with ts=%g, method=%s.",
                sys.n_states, ts, method)
  Ad, Bd, Cd, Dd, _ = scipy.signal.cont2discrete(
      (sys.A, sys.B, sys.C, sys.D), ts, method=DISCRETIZATION_METHODS[method])
  return StateSpace(A=Ad, B=Bd, C=Cd, D=Dd, dt=ts)


def ss2tf(
    sys: StateSpace) -> Union[TransferFunction, List[TransferFunction]]:
  """Converts a state space model into transfer function form.

  Args:
    sys: the state space model.

  Returns:
    For numeric systems one `TransferFunction` per input channel; a single
    input system yields the transfer function itself rather than a list.
    For symbolic systems a single `TransferFunction` holding the full
    transfer matrix `C adj(sI - A) B + D det(sI - A)` over `det(sI - A)`.
  """
  if sys.is_symbolic:
    if sys.is_discrete:
      raise NotImplementedError(
          "Symbolic discrete time transfer functions are not supported.")
    s = sympy.Symbol("s", real=True)
    M = s * sympy.eye(sys.n_states) - sys.A
    den = sympy.expand(M.det(method="berkowitz"))
    num = (sys.C * M.adjugate(method="berkowitz") * sys.B +
           sys.D * den).applyfunc(sympy.expand)
    return TransferFunction(num=num, den=den, dt=None, variable=s)

  variable = sympy.Symbol("z" if sys.is_discrete else "s", real=True)
  tfs = []
  for i in range(sys.n_inputs):
    num, den = scipy.signal.ss2tf(sys.A, sys.B, sys.C, sys.D, input=i)
    tfs.append(
        TransferFunction(num=num, den=den, dt=sys.dt, variable=variable))
  return tfs[0] if len(tfs) == 1 else tfs
