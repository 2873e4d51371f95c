"""
工作区视图 (Workspace View)
单页界面：选择角色、描述任务、生成、查看/复制结果并导出 Word 文档。
界面只负责渲染与分发操作，所有状态变化都经由 services.workflow 完成。
"""
import asyncio
import logging

import streamlit as st

from core.personas import BASELINE_PERSONA, grouped_personas
from core.schemas import Notice
from core.session import SessionState
from prompts import force_reload_prompts
from services import workflow
from services.export_service import DocumentExporter
from services.generation_client import GenerationClient

logger = logging.getLogger(__name__)

SESSION_KEY = "flow_session"
NOTICE_KEY = "pending_notice"


def get_session() -> SessionState:
    """取出 (或创建) 保存在 st.session_state 中的会话状态机"""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = SessionState()
    return st.session_state[SESSION_KEY]


def active_icon(persona: str) -> str:
    if "Developer" in persona:
        return "💻"
    if "Writer" in persona:
        return "✏️"
    if "Designer" in persona:
        return "🎨"
    return "🤖"


def _persona_options() -> dict:
    """
    按分组顺序生成 {角色名: 显示文本}。
    st.selectbox 没有分组控件，分组名作为前缀写进选项文本。
    """
    options = {}
    for group, members in grouped_personas():
        prefix = f"{group} · " if group else ""
        for persona in members:
            options[persona.value] = f"{active_icon(persona.value)} {prefix}{persona.label}"
    return options


@st.cache_data(show_spinner=False, max_entries=16)
def _build_export(markdown_text: str, persona: str, filename_template: str):
    """同一 (文本, 角色) 只转换一次，输入框触发的重跑直接复用结果"""
    exporter = DocumentExporter(filename_template)
    return asyncio.run(workflow.export_text(markdown_text, persona, exporter))


def show_notice(notice, toast: bool = False):
    """把 Notice 映射为 Streamlit 提示组件"""
    if notice is None:
        return
    if toast:
        st.toast(notice.message)
        return
    render = {
        "success": st.success,
        "info": st.info,
        "warning": st.warning,
        "error": st.error,
    }.get(notice.level, st.info)
    render(notice.message)


# --- 控件回调 (在重新渲染前执行，可安全修改控件状态) ---

def _on_persona_change():
    get_session().edit_persona(st.session_state.persona_select)

def _on_task_change():
    get_session().edit_task(st.session_state.task_text)

def _on_clear():
    st.session_state[NOTICE_KEY] = workflow.clear_session(get_session())
    st.session_state.task_text = ""
    st.session_state.persona_select = BASELINE_PERSONA


def _on_reload_prompts():
    force_reload_prompts()
    st.session_state[NOTICE_KEY] = Notice.info("Prompt templates reloaded.")


def render_workspace_view(full_config: dict):
    """
    渲染主界面。

    Args:
        full_config (dict): 合并后的全局配置。
    """
    session = get_session()
    client = GenerationClient.from_config(full_config)
    exporter = DocumentExporter.from_config(full_config)
    persona_options = _persona_options()

    # 控件初始值与状态机保持一致
    st.session_state.setdefault("persona_select", session.persona)
    st.session_state.setdefault("task_text", session.task_text)

    with st.sidebar:
        st.button("🔄 Reload prompt templates", on_click=_on_reload_prompts)

    st.title(f"{active_icon(session.persona)} FreelanceFlow")
    st.caption("Select a persona, describe your task, and let AI handle the heavy lifting.")

    if NOTICE_KEY in st.session_state:
        show_notice(st.session_state.pop(NOTICE_KEY), toast=True)

    with st.container(border=True):
        st.selectbox(
            "Persona",
            options=list(persona_options),
            format_func=persona_options.get,
            key="persona_select",
            on_change=_on_persona_change,
        )
        st.text_area(
            "Task",
            key="task_text",
            height=180,
            placeholder="Describe what you need, e.g. 'Write a tagline for a coffee shop'",
            on_change=_on_task_change,
        )

        c1, c2 = st.columns([3, 1])
        generate_clicked = c1.button(
            "🚀 Generate", type="primary", use_container_width=True, disabled=session.in_flight
        )
        c2.button("🧹 Clear", use_container_width=True, on_click=_on_clear)

    if generate_clicked:
        with st.spinner(f"{session.persona} is working on it..."):
            notice = asyncio.run(workflow.run_generation(session, client))
        show_notice(notice)

    if not session.can_export:
        return

    with st.container(border=True):
        st.subheader("Result")
        st.markdown(session.result_text)

        c1, c2 = st.columns(2)
        if c1.button("📋 Copy", use_container_width=True):
            notice, copied = workflow.copy_result(session)
            # Streamlit 代码块自带复制按钮
            st.code(copied, language="markdown")
            show_notice(notice, toast=True)

        notice, artifact = _build_export(session.result_text, session.persona, exporter.filename_template)
        if artifact is None:
            c2.error(notice.message)
        else:
            c2.download_button(
                "📄 Export to Word",
                data=artifact.data,
                file_name=artifact.filename,
                mime=artifact.mime_type,
                use_container_width=True,
                on_click=lambda: st.session_state.__setitem__(NOTICE_KEY, notice),
            )
