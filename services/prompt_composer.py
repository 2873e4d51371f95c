"""
提示词组装 (Prompt Composer)
将角色设定前言与用户任务拼接为最终发送给生成服务的提示词。
"""
from prompts import get_prompt_template

PROMPT_KEY = "persona_task"

def compose(persona: str, task_text: str) -> str:
    """
    组装提示词：先是角色前言，再是原样的任务描述。

    角色名只在前言中转为大写，不影响会话中保存的值。
    任务描述是否为空由调用方保证。
    """
    template = get_prompt_template(PROMPT_KEY)
    return template.format(persona=persona.upper(), task=task_text)
