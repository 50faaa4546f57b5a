from .floating_base_system import FloatingBaseSystem
from .link_data import LinkData
from .wrench_dynamics import WrenchDynamics

__all__ = [
    'FloatingBaseSystem',
    'LinkData',
    'WrenchDynamics'
]
