"""
业务对象定义 (Schemas)
定义系统各层级间传递的强类型数据结构，确保数据流透明且可预测。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class FailureReason(str, Enum):
    """生成失败的原因"""
    EMPTY_RESPONSE = "empty_response"
    TRANSPORT_ERROR = "transport_error"


class SessionPhase(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationResult:
    """
    一次生成请求的结果 (Success 或 Failure 二选一)。
    由 GenerationClient 创建，只被 SessionState 消费一次。
    """
    markdown_text: Optional[str] = None
    reason: Optional[FailureReason] = None
    detail: str = ""

    @classmethod
    def success(cls, markdown_text: str) -> "GenerationResult":
        return cls(markdown_text=markdown_text)

    @classmethod
    def failure(cls, reason: FailureReason, detail: str = "") -> "GenerationResult":
        return cls(reason=reason, detail=detail)

    @property
    def ok(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class ExportArtifact:
    """导出的二进制文档，按需生成，不在会话中保留"""
    filename: str
    data: bytes
    mime_type: str = DOCX_MIME_TYPE


@dataclass(frozen=True)
class Notice:
    """短暂的用户提示，由 UI 层映射为 st.success / st.warning / st.error 等"""
    level: str
    message: str

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls("success", message)

    @classmethod
    def info(cls, message: str) -> "Notice":
        return cls("info", message)

    @classmethod
    def warning(cls, message: str) -> "Notice":
        return cls("warning", message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls("error", message)
