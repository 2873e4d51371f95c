from prompts.manager import get_prompt_template, force_reload_prompts

__all__ = ["get_prompt_template", "force_reload_prompts"]
