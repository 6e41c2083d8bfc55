# farm_assistant/components/report_renderer.py
"""
ReportRenderer

Turns a serialized IdentificationRecord into a small display tree
(ReportNode) that front ends walk; to_markdown flattens it for Gradio.

render() is total: any text, valid or not, yields a tree. Parse failures come
back from parse_record as Err values and are drawn as the error card.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from farm_assistant.common.logger import get_logger
from farm_assistant.common.records import (
    STATUS_HEALTHY,
    STATUS_IDENTIFIED,
    ControlProduct,
    IdentificationRecord,
    parse_record,
)
from farm_assistant.components.response_sanitizer import strip_emphasis

logger = get_logger(__name__)

GENERIC_RETRY_MESSAGE = "Error displaying identification results. Please try again."

KIND_ICONS = {"pest": "🐛", "disease": "🍂", "plant": "🌿"}
CONFIDENCE_ICONS = {"green": "🟢", "yellow": "🟡", "red": "🔴"}


@dataclass
class ReportNode:
    kind: str
    text: str = ""
    attrs: Dict[str, Any] = field(default_factory=dict)
    children: List["ReportNode"] = field(default_factory=list)

    def find(self, kind: str) -> List["ReportNode"]:
        """All descendants (and self) of the given kind, depth first"""
        found = [self] if self.kind == kind else []
        for child in self.children:
            found.extend(child.find(kind))
        return found


def confidence_color(confidence: int) -> str:
    if confidence > 90:
        return "green"
    if confidence > 75:
        return "yellow"
    return "red"


# -------------------------
# Cards
# -------------------------
def _healthy_card(message: str) -> ReportNode:
    return ReportNode("card", attrs={"variant": "healthy"}, children=[
        ReportNode("heading", "Healthy Plant"),
        ReportNode("paragraph", message),
    ])


def _error_card(message: Optional[str] = None) -> ReportNode:
    children = [ReportNode("heading", "Error")]
    if message:
        children.append(ReportNode("paragraph", message))
    children.append(ReportNode("paragraph", GENERIC_RETRY_MESSAGE))
    return ReportNode("card", attrs={"variant": "error"}, children=children)


def _product(product: ControlProduct, group: str) -> ReportNode:
    children = [
        ReportNode("field", product.active_ingredient, {"label": "Active Ingredient"}),
        ReportNode("field", product.application_rate, {"label": "Application Rate"}),
    ]
    if product.method:
        children.append(ReportNode("field", product.method, {"label": "Application Method"}))
    if group == "chemical" and product.brands:
        children.append(ReportNode("field", ", ".join(product.brands), {"label": "Available Brands"}))
    children.append(ReportNode("field", f"{product.safe_days} days before harvest", {"label": "Safe Days"}))
    if product.safety:
        children.append(ReportNode("callout", product.safety, {"label": "Safety"}))
    return ReportNode("product", product.name, {"group": group}, children)


def _controls_card(record: IdentificationRecord) -> Optional[ReportNode]:
    controls = record.identification.controls
    sections = []
    if controls.chemical:
        sections.append(ReportNode("section", "Chemical Control", {"group": "chemical"},
                                   [_product(p, "chemical") for p in controls.chemical]))
    if controls.organic:
        sections.append(ReportNode("section", "Organic Control", {"group": "organic"},
                                   [_product(p, "organic") for p in controls.organic]))
    if controls.cultural:
        sections.append(ReportNode("section", "Cultural Practices", {"group": "cultural"}, [
            ReportNode("list", children=[ReportNode("item", c) for c in controls.cultural]),
        ]))
    if not sections:
        return None
    return ReportNode("card", "Control Measures", {"variant": "controls"}, sections)


def _identified(record: IdentificationRecord) -> ReportNode:
    ident = record.identification
    color = confidence_color(ident.confidence)
    cards = [
        ReportNode("card", attrs={"variant": "identification"}, children=[
            ReportNode("heading", ident.name),
            ReportNode("confidence", f"{ident.confidence}% confidence", {"value": ident.confidence, "color": color}),
            ReportNode("badge", ident.kind, {"icon": KIND_ICONS.get(ident.kind, KIND_ICONS["disease"])}),
            ReportNode("paragraph", ident.description),
        ]),
    ]
    if ident.causes:
        cards.append(ReportNode("card", "Causes", {"variant": "causes"}, [
            ReportNode("list", children=[ReportNode("item", c) for c in ident.causes]),
        ]))
    controls = _controls_card(record)
    if controls is not None:
        cards.append(controls)
    if ident.affected_plants:
        cards.append(ReportNode("card", "Plants Affected", {"variant": "plants"}, [
            ReportNode("badges", children=[ReportNode("badge", p) for p in ident.affected_plants]),
        ]))
    return ReportNode("report", attrs={"status": STATUS_IDENTIFIED}, children=cards)


def render(text: Any) -> ReportNode:
    """Display tree for any input text; never raises"""
    parsed = parse_record(text)
    if not parsed.ok:
        logger.warning(f"Could not render identification report: {parsed.reason}")
        return ReportNode("report", attrs={"status": "invalid"}, children=[_error_card()])

    # records are sanitized upstream, strip again before display anyway
    record = parsed.value
    record.message = strip_emphasis(record.message)
    if record.identification is not None:
        record.identification = _strip_identification(record.identification)

    if record.status == STATUS_HEALTHY:
        return ReportNode("report", attrs={"status": STATUS_HEALTHY}, children=[_healthy_card(record.message)])
    if record.status == STATUS_IDENTIFIED and record.identification is not None:
        return _identified(record)
    return ReportNode("report", attrs={"status": record.status}, children=[_error_card(record.message)])


def _strip_identification(ident):
    # parse_record builds fresh objects, so rewriting them leaves the input alone
    for attr in ("name", "kind", "description"):
        setattr(ident, attr, strip_emphasis(getattr(ident, attr)))
    ident.causes = strip_emphasis(ident.causes)
    ident.affected_plants = strip_emphasis(ident.affected_plants)
    ident.controls.cultural = strip_emphasis(ident.controls.cultural)
    for product in ident.controls.chemical + ident.controls.organic:
        for attr in ("name", "active_ingredient", "application_rate", "method", "safety"):
            setattr(product, attr, strip_emphasis(getattr(product, attr)))
        product.brands = strip_emphasis(product.brands)
    return ident


# -------------------------
# Markdown
# -------------------------
def _md(node: ReportNode, lines: List[str], depth: int = 0) -> None:
    if node.kind == "report":
        for child in node.children:
            _md(child, lines, depth)
    elif node.kind == "card":
        if node.text:
            lines.append(f"### {node.text}")
        for child in node.children:
            _md(child, lines, depth)
        lines.append("")
    elif node.kind == "heading":
        variant_icon = {"Healthy Plant": "✅ ", "Error": "⚠️ "}.get(node.text, "")
        lines.append(f"## {variant_icon}{node.text}")
    elif node.kind == "paragraph":
        lines.append(node.text)
        lines.append("")
    elif node.kind == "confidence":
        lines.append(f"{CONFIDENCE_ICONS[node.attrs['color']]} {node.text}")
        lines.append("")
    elif node.kind == "badge":
        icon = node.attrs.get("icon")
        lines.append(f"{icon} `{node.text}`" if icon else f"`{node.text}`")
        lines.append("")
    elif node.kind == "badges":
        lines.append(" ".join(f"`{child.text}`" for child in node.children))
    elif node.kind == "list":
        for child in node.children:
            lines.append(f"{'  ' * depth}- {child.text}")
    elif node.kind == "section":
        lines.append(f"#### {node.text}")
        for child in node.children:
            _md(child, lines, depth)
        lines.append("")
    elif node.kind == "product":
        lines.append(f"- {node.text}")
        for child in node.children:
            _md(child, lines, depth + 1)
    elif node.kind == "field":
        lines.append(f"{'  ' * depth}- {node.attrs['label']}: {node.text}")
    elif node.kind == "callout":
        lines.append(f"{'  ' * depth}> ⚠️ {node.attrs['label']}: {node.text}")


def to_markdown(tree: ReportNode) -> str:
    lines: List[str] = []
    _md(tree, lines)
    return "\n".join(lines).strip() + "\n"


def render_markdown(text: Any) -> str:
    return to_markdown(render(text))
