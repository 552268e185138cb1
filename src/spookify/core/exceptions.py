"""项目内使用的自定义异常定义。"""


class SpookifyError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(SpookifyError):
    """配置不合法时抛出。"""


class MalformedInvocationError(SpookifyError):
    """命令行参数格式错误（例如出现多个位置参数）。"""


class EnumerationError(SpookifyError):
    """输入路径不存在或无法遍历。"""


class MirrorError(SpookifyError):
    """输出目录镜像复制失败。"""


class AssetMissingError(SpookifyError):
    """装饰素材文件缺失。"""


class CompositeError(SpookifyError):
    """解码、缩放或合成单张图片失败。"""
