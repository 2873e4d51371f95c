"""
自定义异常类
用于在应用的不同层之间传递具有明确语义的错误信息。
所有异常都在 services.workflow 边界被捕获并转换为用户可见的提示 (Notice)。
"""

class FreelanceFlowError(Exception):
    """应用内所有业务异常的基类"""
    pass

class InputValidationError(FreelanceFlowError):
    """用户输入不合法 (例如任务描述为空)，阻止提交，不属于系统故障"""
    pass

class GenerationInProgressError(InputValidationError):
    """已有一个生成请求在进行中时再次提交"""
    pass

class TransportError(FreelanceFlowError):
    """生成服务不可达、超时或返回非 2xx 状态码"""
    pass

class EmptyResponseError(FreelanceFlowError):
    """生成服务有响应，但其中没有可用的文本内容"""
    pass

class ExportError(FreelanceFlowError):
    """Markdown 转换为 Word 文档的任一阶段失败"""
    pass

class ConfigurationError(FreelanceFlowError):
    """当应用配置不正确或缺失时发生错误"""
    pass
