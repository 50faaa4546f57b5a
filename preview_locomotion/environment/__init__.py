from .leg_collision_feature import LegCollisionFeature, RobotAndTerrain, SearchArea

__all__ = [
    'LegCollisionFeature',
    'RobotAndTerrain',
    'SearchArea'
]
