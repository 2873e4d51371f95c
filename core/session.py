"""
会话状态机 (Session State)
保存当前角色、任务描述、最近一次生成结果及请求进行中标记，
所有状态变化都通过本类的方法完成，与 UI 框架 (Streamlit) 彻底解耦。

状态: IDLE -> GENERATING -> SUCCEEDED / FAILED，clear 在任意状态回到 IDLE。
每次提交都会领取一个递增的请求序号，只有序号与当前一致的响应才会被采纳，
以防 clear 之后迟到的响应覆盖已重置的会话。
"""
import logging
from typing import Optional

from core.exceptions import GenerationInProgressError, InputValidationError
from core.personas import BASELINE_PERSONA, is_known_persona
from core.schemas import GenerationResult, SessionPhase

logger = logging.getLogger(__name__)


class SessionState:
    def __init__(self):
        self.persona: str = BASELINE_PERSONA
        self.task_text: str = ""
        self.last_result: Optional[GenerationResult] = None
        self.in_flight: bool = False
        self.phase: SessionPhase = SessionPhase.IDLE
        self._request_counter: int = 0

    # --- 用户编辑 ---

    def edit_task(self, text: str):
        """更新任务描述。不会清除已显示的结果。"""
        self.task_text = text or ""
        self._back_to_idle()

    def edit_persona(self, value: str):
        """切换角色，角色必须来自固定目录。"""
        if not value or not value.strip():
            raise InputValidationError("Persona must not be empty.")
        if not is_known_persona(value):
            raise InputValidationError(f"Unknown persona: {value}")
        self.persona = value
        self._back_to_idle()

    def _back_to_idle(self):
        # 生成进行中时只更新字段，不打断请求
        if self.phase is not SessionPhase.GENERATING:
            self.phase = SessionPhase.IDLE

    # --- 生成生命周期 ---

    def begin_submit(self) -> int:
        """
        进入 GENERATING 状态并领取请求序号。

        Returns:
            int: 本次请求的序号，需原样交给 resolve()。

        Raises:
            InputValidationError: 任务描述去除空白后为空。
            GenerationInProgressError: 已有请求在进行中。
        """
        if self.in_flight:
            logger.warning("已有生成请求在进行中，拒绝重复提交。")
            raise GenerationInProgressError("A generation is already running.")
        if not self.task_text.strip():
            logger.info("任务描述为空，拒绝提交。")
            raise InputValidationError("Please enter a prompt first!")

        self._request_counter += 1
        self.in_flight = True
        self.last_result = None
        self.phase = SessionPhase.GENERATING
        logger.info(f"开始生成请求 #{self._request_counter} (角色: {self.persona})")
        return self._request_counter

    def resolve(self, ticket: int, result: GenerationResult) -> bool:
        """
        采纳生成结果。序号不匹配或当前没有进行中的请求时丢弃该结果。

        Returns:
            bool: 结果是否被采纳。
        """
        if not self.in_flight or ticket != self._request_counter:
            logger.info(f"丢弃过期响应 #{ticket} (当前序号: {self._request_counter})")
            return False

        self.last_result = result
        self.in_flight = False
        self.phase = SessionPhase.SUCCEEDED if result.ok else SessionPhase.FAILED
        logger.info(f"请求 #{ticket} 完成，状态: {self.phase.value}")
        return True

    def clear(self):
        """重置为初始状态，并使任何进行中的请求失效。"""
        self._request_counter += 1
        self.task_text = ""
        self.persona = BASELINE_PERSONA
        self.last_result = None
        self.in_flight = False
        self.phase = SessionPhase.IDLE

    # --- 只读辅助 ---

    @property
    def result_text(self) -> Optional[str]:
        if self.last_result is not None and self.last_result.ok:
            return self.last_result.markdown_text
        return None

    @property
    def can_export(self) -> bool:
        return bool(self.result_text)

    def snapshot(self) -> dict:
        return {
            "persona": self.persona,
            "task_text": self.task_text,
            "last_result": self.last_result,
            "in_flight": self.in_flight,
            "phase": self.phase,
        }
