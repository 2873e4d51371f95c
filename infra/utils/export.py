"""
文档导出工具
Markdown -> HTML 片段 -> 带固定样式的 HTML 文档 -> Word (.docx) 字节流。
本模块只做格式转换，不涉及文件名与会话状态。
"""
import io
import re
import logging

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag
from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor
from markdown_it import MarkdownIt

logger = logging.getLogger(__name__)

# --- 基础样式 (HTML 样式表与 Word 样式共用同一组数值) ---
BASE_FONT = "Arial"
BASE_FONT_SIZE_PT = 11
HEADING_SIZES_PT = {1: 20, 2: 16}
HEADING_COLOR = "000000"
CODE_FONT = "Consolas"
CODE_BACKGROUND = "ffffff"

STYLESHEET = f"""
      body {{ font-family: '{BASE_FONT}', sans-serif; font-size: {BASE_FONT_SIZE_PT}pt; }}
      h1 {{ font-size: {HEADING_SIZES_PT[1]}pt; color: #{HEADING_COLOR}; }}
      h2 {{ font-size: {HEADING_SIZES_PT[2]}pt; color: #{HEADING_COLOR}; }}
      code {{ background-color: #{CODE_BACKGROUND}; font-family: {CODE_FONT}, monospace; }}
"""

HTML_SCAFFOLD = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <style>{style}</style>
  </head>
  <body>
{body}
  </body>
</html>
"""

_md = MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])

_BLOCK_SKIP_TAGS = {"style", "script", "head", "title", "meta"}
_LIST_TAGS = {"ul", "ol"}
_MAX_LIST_LEVEL = 3


def render_markdown(markdown_text: str) -> str:
    """Markdown (CommonMark + 表格/删除线) 转 HTML 片段"""
    return _md.render(markdown_text)


def wrap_html_document(fragment: str) -> str:
    """把 HTML 片段包进带固定样式的完整文档，使导出结果不依赖查看程序的默认样式"""
    return HTML_SCAFFOLD.format(style=STYLESHEET, body=fragment)


def html_to_docx(html_document: str) -> bytes:
    """
    将 HTML 文档转换为 .docx 字节流。

    Args:
        html_document (str): 由 wrap_html_document 生成的 HTML。

    Returns:
        bytes: Word 文档内容。
    """
    soup = BeautifulSoup(html_document, "html.parser")
    root = soup.body or soup

    document = Document()
    _apply_base_styles(document)
    _DocxWriter(document).write_blocks(root)

    buffer = io.BytesIO()
    document.save(buffer)
    data = buffer.getvalue()
    logger.debug(f"DOCX 生成完成，大小 {len(data)} 字节")
    return data


def _apply_base_styles(document):
    normal = document.styles["Normal"]
    normal.font.name = BASE_FONT
    normal.font.size = Pt(BASE_FONT_SIZE_PT)

    for level, size in HEADING_SIZES_PT.items():
        style = document.styles[f"Heading {level}"]
        style.font.name = BASE_FONT
        style.font.size = Pt(size)
        style.font.color.rgb = RGBColor.from_string(HEADING_COLOR)
        # 主题字体会覆盖显式字体
        rfonts = style.element.rPr.rFonts
        for attr in ("w:asciiTheme", "w:hAnsiTheme", "w:eastAsiaTheme", "w:cstheme"):
            rfonts.attrib.pop(qn(attr), None)


def _shade_run(run, fill: str):
    rpr = run._r.get_or_add_rPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    rpr.append(shd)


def _add_bottom_border(paragraph):
    ppr = paragraph._p.get_or_add_pPr()
    border = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "6")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), "auto")
    border.append(bottom)
    ppr.append(border)


def _is_ignorable(node) -> bool:
    return isinstance(node, (Comment, Doctype))


class _DocxWriter:
    """按 HTML 节点顺序向 python-docx 文档写入段落、列表、代码块和表格"""

    def __init__(self, document):
        self.document = document

    # --- 块级元素 ---

    def write_blocks(self, parent, paragraph_style=None):
        for node in parent.children:
            if _is_ignorable(node):
                continue
            if isinstance(node, NavigableString):
                text = _collapse(str(node))
                if text.strip():
                    paragraph = self.document.add_paragraph(style=paragraph_style)
                    paragraph.add_run(text.strip())
                continue
            self.write_block(node, paragraph_style)

    def write_block(self, tag: Tag, paragraph_style=None):
        name = tag.name
        if name in _BLOCK_SKIP_TAGS:
            return
        if re.fullmatch(r"h[1-6]", name):
            paragraph = self.document.add_heading(level=int(name[1]))
            self.write_inline(paragraph, tag)
        elif name == "p":
            paragraph = self.document.add_paragraph(style=paragraph_style)
            self.write_inline(paragraph, tag)
        elif name in _LIST_TAGS:
            self.write_list(tag, level=1)
        elif name == "pre":
            self.write_code_block(tag)
        elif name == "blockquote":
            self.write_blocks(tag, paragraph_style="Quote")
        elif name == "hr":
            _add_bottom_border(self.document.add_paragraph())
        elif name == "table":
            self.write_table(tag)
        elif name in ("div", "section", "article", "main", "header", "footer", "body", "html"):
            self.write_blocks(tag, paragraph_style)
        else:
            # 块级位置上的行内元素 (例如原始 HTML 中的 <span>)
            paragraph = self.document.add_paragraph(style=paragraph_style)
            self.write_inline(paragraph, tag, _wrap=True)

    def write_list(self, list_tag: Tag, level: int):
        kind = "List Number" if list_tag.name == "ol" else "List Bullet"
        capped = min(level, _MAX_LIST_LEVEL)
        style = kind if capped == 1 else f"{kind} {capped}"

        for item in list_tag.find_all("li", recursive=False):
            paragraph = self.document.add_paragraph(style=style)
            for child in item.children:
                if isinstance(child, Tag) and child.name in _LIST_TAGS:
                    self.write_list(child, level + 1)
                elif isinstance(child, Tag) and child.name == "p":
                    # 松散列表: 多个段落合并到同一列表项
                    if paragraph.text:
                        paragraph.add_run().add_break()
                    self.write_inline(paragraph, child)
                else:
                    self._write_inline_node(paragraph, child, {})

    def write_code_block(self, pre: Tag):
        lines = pre.get_text().rstrip("\n").split("\n")
        paragraph = self.document.add_paragraph()
        for index, line in enumerate(lines):
            run = paragraph.add_run(line)
            run.font.name = CODE_FONT
            _shade_run(run, CODE_BACKGROUND)
            if index < len(lines) - 1:
                run.add_break()

    def write_table(self, table_tag: Tag):
        rows = table_tag.find_all("tr")
        if not rows:
            return
        width = max(len(row.find_all(["td", "th"], recursive=False)) for row in rows)
        if width == 0:
            return
        table = self.document.add_table(rows=len(rows), cols=width)
        table.style = "Table Grid"
        for r, row in enumerate(rows):
            for c, cell_tag in enumerate(row.find_all(["td", "th"], recursive=False)):
                paragraph = table.cell(r, c).paragraphs[0]
                self.write_inline(paragraph, cell_tag, {"bold": cell_tag.name == "th"})

    # --- 行内元素 ---

    def write_inline(self, paragraph, tag: Tag, fmt=None, _wrap=False):
        fmt = dict(fmt or {})
        if _wrap:
            self._write_inline_node(paragraph, tag, fmt)
            return
        for child in tag.children:
            self._write_inline_node(paragraph, child, fmt)

    def _write_inline_node(self, paragraph, node, fmt: dict):
        if _is_ignorable(node):
            return
        if isinstance(node, NavigableString):
            text = _collapse(str(node))
            if not text or (not paragraph.runs and not text.strip()):
                return
            if not paragraph.runs:
                text = text.lstrip()
            self._add_run(paragraph, text, fmt)
            return

        name = node.name
        if name in _BLOCK_SKIP_TAGS:
            return
        if name == "br":
            paragraph.add_run().add_break()
            return
        if name == "img":
            alt = node.get("alt", "")
            if alt:
                self._add_run(paragraph, f"[{alt}]", fmt)
            return
        if name in _LIST_TAGS:
            # 行内位置出现的列表 (表格单元格等) 退化为逐项文本
            for item in node.find_all("li", recursive=False):
                paragraph.add_run().add_break()
                self._add_run(paragraph, "• ", fmt)
                self.write_inline(paragraph, item, fmt)
            return

        child_fmt = dict(fmt)
        if name in ("strong", "b"):
            child_fmt["bold"] = True
        elif name in ("em", "i"):
            child_fmt["italic"] = True
        elif name in ("del", "s", "strike"):
            child_fmt["strike"] = True
        elif name in ("a", "u"):
            child_fmt["underline"] = True
        elif name in ("code", "kbd", "samp"):
            child_fmt["code"] = True

        for child in node.children:
            self._write_inline_node(paragraph, child, child_fmt)

    def _add_run(self, paragraph, text: str, fmt: dict):
        run = paragraph.add_run(text)
        if fmt.get("bold"):
            run.bold = True
        if fmt.get("italic"):
            run.italic = True
        if fmt.get("strike"):
            run.font.strike = True
        if fmt.get("underline"):
            run.underline = True
        if fmt.get("code"):
            run.font.name = CODE_FONT
            _shade_run(run, CODE_BACKGROUND)
        return run


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text)
