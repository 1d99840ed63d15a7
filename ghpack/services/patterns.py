"""
正则占位符处理

{mc_version} 与 {loader} 在编译前被替换为转义后的上下文值。
"""

import re

from ghpack.exceptions import PatternError
from ghpack.models import VersionContext

MC_VERSION_PLACEHOLDER = "{mc_version}"
LOADER_PLACEHOLDER = "{loader}"


def resolve_placeholders(pattern: str, context: VersionContext) -> str:
    """替换占位符，替换值中的正则特殊字符会被转义"""
    return pattern.replace(
        MC_VERSION_PLACEHOLDER, re.escape(context.minecraft)
    ).replace(LOADER_PLACEHOLDER, re.escape(context.loader.value))


def compile_pattern(
    pattern: str, context: VersionContext, field: str = "pattern"
) -> re.Pattern:
    """替换占位符并编译，编译失败抛出 PatternError"""
    expanded = resolve_placeholders(pattern, context)
    try:
        return re.compile(expanded)
    except re.error as e:
        raise PatternError(
            f"{field} 不是合法的正则表达式: {e}",
            context={"field": field, "pattern": pattern, "expanded": expanded},
        ) from e
