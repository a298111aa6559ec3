"""Runtime 模块 - 组件构造"""

from .bootstrap import RuntimeComponents, bootstrap

__all__ = ["RuntimeComponents", "bootstrap"]
