"""能量模块 - 非键能增量评估与漂移跟踪"""

__all__ = ["NonbondedEnergy", "EnergyDriftTracker", "DriftReport"]


# 延迟导入避免循环依赖
def __getattr__(name):
    if name == "NonbondedEnergy":
        from .nonbonded import NonbondedEnergy

        return NonbondedEnergy
    elif name in ("EnergyDriftTracker", "DriftReport"):
        from . import drift

        return getattr(drift, name)
    else:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
