"""
文档导出服务 (Document Exporter)
把当前生成的 Markdown 转换为带固定样式的 Word 文档，并按当前角色命名。
不修改会话状态，失败时不会留下任何中间文件。
"""
from __future__ import annotations
import asyncio
import logging
import re

from config.loader import get_export_settings
from core.exceptions import ExportError
from core.schemas import ExportArtifact
from infra.utils import export as export_utils

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_TEMPLATE = "FreelanceFlow_{persona}.docx"


class DocumentExporter:
    def __init__(self, filename_template: str = DEFAULT_FILENAME_TEMPLATE):
        self.filename_template = filename_template

    @classmethod
    def from_config(cls, config: dict) -> "DocumentExporter":
        return cls(get_export_settings(config)["filename_template"])

    def build_filename(self, persona: str) -> str:
        """角色名中的连续空白替换为下划线后填入文件名模板"""
        return self.filename_template.format(persona=re.sub(r"\s+", "_", persona.strip()))

    def build_html(self, markdown_text: str) -> str:
        """前两步: Markdown -> HTML 片段 -> 带样式的完整 HTML 文档"""
        return export_utils.wrap_html_document(export_utils.render_markdown(markdown_text))

    async def export(self, markdown_text: str, persona: str) -> ExportArtifact:
        """
        执行完整导出流水线。

        Args:
            markdown_text (str): 当前生成结果。
            persona (str): 当前角色，用于文件命名。

        Returns:
            ExportArtifact: 文件名、docx 字节流与 MIME 类型。

        Raises:
            ExportError: 内容为空或任一转换阶段失败。
        """
        if not markdown_text or not markdown_text.strip():
            raise ExportError("Nothing to export yet.")

        try:
            html_document = self.build_html(markdown_text)
            # 文档转换是 CPU 密集操作，放到工作线程避免阻塞事件循环
            data = await asyncio.to_thread(export_utils.html_to_docx, html_document)
        except Exception as e:
            logger.error(f"导出 Word 文档失败: {e}", exc_info=True)
            raise ExportError(f"Failed to export document: {e}") from e

        filename = self.build_filename(persona)
        logger.info(f"导出完成: {filename} ({len(data)} 字节)")
        return ExportArtifact(filename=filename, data=data)
