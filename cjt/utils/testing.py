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

"""Joint models used by the tests."""
import numpy as np

from cjt.joints.core import GenericJoint

# Lemon 50:1 actuator, 6000 Nm/rad torsion bar, link side values.
LEMON_PARAMS = {
    "name": "Lemon",
    "param_name": "lemon_50_6000",
    "model_name": "TorsionJoint",
    "nonlinear_model_name": "coulomb",
    "n": 50,
    "m": 1.28,
    "I_m": 4.716e-02,
    "I_g": 2.8e-02,
    "I_b": 1.137e-04,
    "k_g": 13000.0,
    "k_b": 6000.0,
    "d_m": 5.340708e-04,
    "d_g": 3.0,
    "d_b": 0.0,
    "d_m_n": 5.170708e-04,
    "d_g_n": 2.8,
    "d_b_n": 0.0,
    "d_mg": 100.0,
    "d_gb": 0.0,
    "d_cm": 1.05,
    "d_cg": 3.3,
    "d_cb": 0.0,
    "d_cm_n": 0.98,
    "d_cg_n": 3.17,
    "d_cb_n": 0.0,
    "k_t": 4.9e-02,
    "r": 3.55e-01,
    "x": 1.5e-04,
    "Ts": 1e-03,
    "v_0": 48.0,
    "i_p": 26.9,
    "dq_p": 19.40752,
    "r_th1": 3.527326,
    "r_th2": 32.66368,
    "T_thw": 23.45093,
    "T_thm": 3008.549,
    "Tmp_WMax": 155.0,
}


class TorsionJoint(GenericJoint):
  """Motor and torsion bar inertia coupled by the torsion bar.

  States `[q_m, q_b, dq_m, dq_b]`, input motor current, output torsion bar
  torque.
  """

  def get_dynamics_matrices(self):
    J = self.I_m + self.I_g
    I = self.matrix([[J, 0], [0, self.I_b]])
    D = self.matrix([[self.d_m + self.d_gb, -self.d_gb],
                     [-self.d_gb, self.d_b + self.d_gb]])
    K = self.matrix([[self.k_b, -self.k_b], [-self.k_b, self.k_b]])

    A = self.matrix([
        [0, 0, 1, 0],
        [0, 0, 0, 1],
        [-self.k_b / J, self.k_b / J, -(self.d_m + self.d_gb) / J,
         self.d_gb / J],
        [self.k_b / self.I_b, -self.k_b / self.I_b, self.d_gb / self.I_b,
         -(self.d_b + self.d_gb) / self.I_b],
    ])
    B = self.matrix([[0], [0], [self.k_t * self.n / J], [0]])
    C = self.matrix([[self.k_b, -self.k_b, 0, 0]])
    return A, B, C, I, D, K

  def get_nonlinear_dynamics(self, x, dx):
    q_m = np.asarray(x)[0]
    dq_m, dq_b = np.asarray(dx)
    cogging = (self.cog_a1 * np.cos(self.cog_f * q_m) +
               self.cog_a2 * np.sin(self.cog_f * q_m))
    tau_m = np.where(dq_m > 0, self.d_cm, np.where(dq_m < 0, -self.d_cm_n, 0.))
    tau_b = np.where(dq_b > 0, self.d_cb, np.where(dq_b < 0, -self.d_cb_n, 0.))
    return np.array([tau_m + cogging, tau_b])
