"""
ghpack 下载层

负责下载 release 文件并计算内容哈希。
"""

from ghpack.download.fetcher import ArtifactFetcher, HASH_FORMAT

__all__ = [
    "ArtifactFetcher",
    "HASH_FORMAT",
]
