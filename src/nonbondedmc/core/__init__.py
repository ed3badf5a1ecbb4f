"""
核心模块 - 原子类型表、粒子存储、基团、变更集、几何与配置管理
"""

__all__ = [
    "AtomType",
    "AtomTypeTable",
    "Particle",
    "Group",
    "ParticleStore",
    "GroupChange",
    "Change",
    "Geometry",
    "Cuboid",
    "OpenGeometry",
    "ConfigManager",
]


# 延迟导入避免循环依赖
def __getattr__(name):
    if name in ("AtomType", "AtomTypeTable"):
        from . import atomdata

        return getattr(atomdata, name)
    elif name in ("Particle", "Group", "ParticleStore", "GroupChange", "Change"):
        from . import structure

        return getattr(structure, name)
    elif name in ("Geometry", "Cuboid", "OpenGeometry"):
        from . import geometry

        return getattr(geometry, name)
    elif name == "ConfigManager":
        from .config import ConfigManager

        return ConfigManager
    else:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
