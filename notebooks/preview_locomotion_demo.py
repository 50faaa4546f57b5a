"""Demonstration of the multi-phase locomotion preview on a trotting quadruped.

The robot starts standing with all the feet loaded. Diagonal leg pairs swing in
turn while the planned CoP moves forward, and the preview predicts the CoM,
heading and foot motion of every phase with the SLIP / spring-mass models.

Reference:
- Mastalli, Carlos et al. - Hierarchical planning of dynamic movements without
  scheduled contact sequences
"""

import os

import matplotlib.pyplot as plt
import numpy as np
from omegaconf import OmegaConf

from preview_locomotion.run_preview import run_preview

# Load configuration
config_path = os.path.join(
    os.path.dirname(__file__), '..', 'preview_locomotion', 'config.yaml'
)
config = OmegaConf.load(config_path)
config.demo.n_phases = 6

trajectory, full_traj = run_preview(config)

time = np.array([sample.time for sample in trajectory])
com_pos = np.array([sample.com_pos for sample in trajectory])
com_vel = np.array([sample.com_vel for sample in trajectory])
cop = np.array([sample.cop for sample in trajectory])
base_pos = np.array([state.base_pos[3:] for state in full_traj])

fig, axes = plt.subplots(3, 1, figsize=(10, 10), sharex=True)

axes[0].plot(time, com_pos[:, 0], 'b-', label='CoM x')
axes[0].plot(time, cop[:, 0], 'r--', label='CoP x (planned)')
axes[0].plot(time, base_pos[:, 0], 'g:', label='Base x')
axes[0].set_ylabel('Position (m)')
axes[0].set_title('Horizontal motion (SLIP)')
axes[0].legend()
axes[0].grid(True)

axes[1].plot(time, com_pos[:, 2], 'b-', label='CoM z')
axes[1].set_ylabel('Height (m)')
axes[1].set_title('Vertical motion (spring-mass)')
axes[1].legend()
axes[1].grid(True)

for name in trajectory[0].foot_pos:
    foot_z = np.array([sample.foot_pos[name][2] for sample in trajectory])
    axes[2].plot(time, foot_z, label=name)
axes[2].set_xlabel('Time (s)')
axes[2].set_ylabel('Foot z w.r.t. base (m)')
axes[2].set_title('Swing pattern')
axes[2].legend()
axes[2].grid(True)

plt.tight_layout()
plt.show()

print(f"Previewed {len(trajectory)} samples, final CoM: {com_pos[-1]}")
