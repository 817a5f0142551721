from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class ReportRenderer:
    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"]),
        )

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        template = self.env.get_template(template_name)
        return template.render(**data)

    def report_card_html(self, report_card: Dict[str, Any]) -> str:
        """ReportCardService.generate() 결과로 인쇄용 성적표 HTML 생성"""
        return self._render_template("report_card.html", {"card": report_card})
