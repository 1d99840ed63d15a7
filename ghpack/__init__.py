"""
ghpack - 从 GitHub Release 更新 packwiz 模组描述文件
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
