"""
工作流协调中心 (Workflow)
系统的 Facade 层，UI 的每个操作都只调用这里的一个函数。
负责在边界处捕获所有业务异常，并统一转换为用户提示 (Notice)。
"""
from __future__ import annotations
import logging
from typing import Optional, Tuple

from core.exceptions import ExportError, InputValidationError
from core.schemas import ExportArtifact, FailureReason, GenerationResult, Notice
from core.session import SessionState
from services.prompt_composer import compose

logger = logging.getLogger(__name__)

FAILURE_MESSAGES = {
    FailureReason.EMPTY_RESPONSE: "Unexpected server response.",
    FailureReason.TRANSPORT_ERROR: "Connection failed. Please try again.",
}


async def run_generation(session: SessionState, client) -> Optional[Notice]:
    """
    在“单请求”约束下执行一次生成。

    Args:
        session: 当前会话状态。
        client: 具有 async submit(prompt) -> GenerationResult 的客户端。

    Returns:
        Notice: 需要展示给用户的提示；若响应因 clear 已过期被丢弃则返回 None。
    """
    try:
        ticket = session.begin_submit()
    except InputValidationError as e:
        return Notice.warning(str(e))

    # 提示词模板可能在运行时被改坏，组装失败也必须复位 in_flight
    try:
        prompt = compose(session.persona, session.task_text)
        result = await client.submit(prompt)
    except Exception as e:
        logger.error(f"生成请求未能完成: {e}", exc_info=True)
        result = GenerationResult.failure(FailureReason.TRANSPORT_ERROR, str(e))

    if not session.resolve(ticket, result):
        return None

    if result.ok:
        return Notice.success("Content created!")
    logger.warning(f"生成失败: {result.reason.value} ({result.detail})")
    return Notice.error(FAILURE_MESSAGES[result.reason])


async def run_export(session: SessionState, exporter) -> Tuple[Notice, Optional[ExportArtifact]]:
    """导出当前结果为 Word 文档，失败不影响生成状态"""
    if not session.can_export:
        return Notice.warning("Generate some content before exporting."), None
    return await export_text(session.result_text, session.persona, exporter)


async def export_text(markdown_text: str, persona: str, exporter) -> Tuple[Notice, Optional[ExportArtifact]]:
    """
    按给定文本与角色导出，不读取会话。
    UI 层以 (文本, 角色) 为键缓存本函数的结果，避免每次重跑都重新转换。
    """
    try:
        artifact = await exporter.export(markdown_text, persona)
    except ExportError as e:
        logger.warning(f"导出失败: {e}")
        return Notice.error("Failed to export document."), None

    return Notice.success("Document downloaded!"), artifact


def copy_result(session: SessionState) -> Tuple[Optional[Notice], Optional[str]]:
    """返回需要复制到剪贴板的原文 (不做任何转换)"""
    text = session.result_text
    if not text:
        return None, None
    return Notice.success("Copied to clipboard"), text


def clear_session(session: SessionState) -> Notice:
    session.clear()
    logger.info("会话已清空。")
    return Notice.info("Workspace cleared.")
