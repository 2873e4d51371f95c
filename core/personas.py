"""
角色目录 (Persona Catalog)
固定、有序的角色列表。分组仅用于界面展示，对核心逻辑不透明。
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Persona:
    value: str          # 提交给模型的角色名
    label: str          # 界面显示名
    group: Optional[str] = None


BASELINE_PERSONA = "General Assistant"

PERSONA_CATALOG: Tuple[Persona, ...] = (
    Persona(BASELINE_PERSONA, "General Assistant"),

    Persona("Copywriter", "Copywriter", "Writing & Content"),
    Persona("SEO Content Writer", "SEO Specialist", "Writing & Content"),
    Persona("Technical Writer", "Technical Writer", "Writing & Content"),
    Persona("Proofreader", "Proofreader/Editor", "Writing & Content"),
    Persona("Screenwriter", "Scriptwriter", "Writing & Content"),
    Persona("Ghostwriter", "Ghostwriter", "Writing & Content"),

    Persona("Full Stack Developer", "Full Stack Developer", "Development & Tech"),
    Persona("Frontend Developer", "Frontend Developer", "Development & Tech"),
    Persona("Backend Developer", "Backend Developer", "Development & Tech"),
    Persona("Mobile App Developer", "Mobile App Dev", "Development & Tech"),
    Persona("Data Scientist", "Data Scientist", "Development & Tech"),

    Persona("Graphic Designer", "Graphic Designer", "Design & Creative"),
    Persona("Logo Designer", "Logo Designer", "Design & Creative"),
    Persona("Video Editor", "Video Editor", "Design & Creative"),

    Persona("Social Media Manager", "Social Media Manager", "Marketing & Strategy"),
    Persona("Email Marketer", "Email Marketer", "Marketing & Strategy"),
    Persona("Digital Marketing Strategist", "Marketing Strategist", "Marketing & Strategy"),
    Persona("PPC Specialist", "PPC Specialist", "Marketing & Strategy"),

    Persona("Virtual Assistant", "Virtual Assistant", "Business & Admin"),
    Persona("Project Manager", "Project Manager", "Business & Admin"),
    Persona("Legal Consultant", "Legal Consultant", "Business & Admin"),
    Persona("Translator", "Translator", "Business & Admin"),
    Persona("Proposal Writer", "Proposal Writer", "Business & Admin"),
)

_KNOWN_VALUES = frozenset(p.value for p in PERSONA_CATALOG)


def is_known_persona(value: str) -> bool:
    return value in _KNOWN_VALUES


def grouped_personas() -> List[Tuple[Optional[str], List[Persona]]]:
    """
    按分组聚合角色，保持目录中的先后顺序。

    Returns:
        List[Tuple[Optional[str], List[Persona]]]: (分组名, 角色列表)，基础角色的分组名为 None。
    """
    groups: List[Tuple[Optional[str], List[Persona]]] = []
    for persona in PERSONA_CATALOG:
        if groups and groups[-1][0] == persona.group:
            groups[-1][1].append(persona)
        else:
            groups.append((persona.group, [persona]))
    return groups
