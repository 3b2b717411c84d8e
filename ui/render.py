"""Rendering helpers for report narrative and derived chart data."""
from typing import Any, Dict, List, Optional

import pandas as pd
from bs4 import BeautifulSoup, Comment

ALLOWED_TAGS = {
    "h1", "h2", "h3", "h4", "h5", "h6", "p", "br", "hr", "div", "span",
    "ul", "ol", "li", "strong", "b", "em", "i", "u", "code", "pre", "blockquote",
    "a", "table", "thead", "tbody", "tr", "th", "td",
}
DROPPED_TAGS = {"script", "style", "iframe", "object", "embed", "form", "input", "button", "textarea", "select", "meta", "link"}
SAFE_SCHEMES = ("http://", "https://", "mailto:")

SECTION_TITLES = [
    "Professional Summary",
    "Detailed Analysis",
    "Recommendations for Improvement",
    "Learning Resources",
]


def sanitize_html(fragment: Optional[str]) -> str:
    """
    Reduce model-generated HTML to a small allow-list before rendering.

    Unknown tags are unwrapped (their text survives), dangerous ones are
    removed with their contents, and only http/https/mailto links keep an href.
    """
    if not fragment:
        return ""
    soup = BeautifulSoup(fragment, "html.parser")

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    for tag in soup.find_all(DROPPED_TAGS):
        tag.decompose()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        href = tag.get("href") if tag.name == "a" else None
        tag.attrs = {}
        if href and href.strip().lower().startswith(SAFE_SCHEMES):
            tag.attrs = {"href": href.strip(), "target": "_blank", "rel": "noopener noreferrer"}
    return str(soup)


def strip_html(fragment: Optional[str]) -> str:
    if not fragment:
        return ""
    soup = BeautifulSoup(fragment, "html.parser")
    for tag in soup.find_all(DROPPED_TAGS):
        tag.decompose()
    return " ".join(soup.get_text(" ").split())


def format_section(text: Optional[str]) -> str:
    """Drop a section title the model sometimes prepends to a section body."""
    cleaned = (text or "").strip()
    for title in SECTION_TITLES:
        if cleaned.startswith(title):
            cleaned = cleaned[len(title):].lstrip(" :\n")
    return cleaned


def skills_frame(skills_analysis: List[Dict[str, Any]]) -> pd.DataFrame:
    """Skills table for the relevance / match / gap chart, most relevant first."""
    columns = ["skill", "relevance", "match", "gap"]
    rows = [{c: item.get(c, "" if c == "skill" else 0) for c in columns} for item in skills_analysis or []]
    df = pd.DataFrame(rows, columns=columns)
    if df.empty:
        return df
    return df.sort_values("relevance", ascending=False, kind="stable").reset_index(drop=True)


def quiz_feedback_rows(quiz_results: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Per-question feedback rows built from a serialised quiz result."""
    questions = quiz_results.get("questions") or []
    rows = []
    for fb in quiz_results.get("feedback") or []:
        i = fb.get("questionIndex", 0)
        q = questions[i] if i < len(questions) else {}
        options = q.get("options") or []
        selected = fb.get("selectedAnswer")
        correct = fb.get("correctAnswer")
        rows.append({
            "number": i + 1,
            "question": q.get("question", ""),
            "selected": options[selected] if selected is not None and 0 <= selected < len(options) else "",
            "correct": options[correct] if correct is not None and 0 <= correct < len(options) else "",
            "isCorrect": bool(fb.get("isCorrect")),
            "explanation": fb.get("explanation", ""),
        })
    return rows


def report_label(report: Dict[str, Any], title: str) -> str:
    score = (report.get("analysis") or {}).get("score", 0)
    created = str(report.get("createdAt", ""))[:16].replace("T", " ")
    return f"{title} · {score}/100 ({created})"
