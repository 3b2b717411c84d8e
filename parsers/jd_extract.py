import re

TITLE_PATTERNS = [
    r"We[’']?re\s+(?:seeking|looking\s+for|hiring)\s+an?\s+([A-Z][A-Za-z0-9 /&\-]{2,50}?)(?=[.,;:!\n]|\s+(?:to|who|with)\b|$)",
    r"Looking\s+for\s+an?\s+([A-Za-z][A-Za-z0-9 /&\-]{2,50}?)(?=[.,;:!\n]|\s+(?:to|who|with)\b|$)",
    r"Job\s+Title[:\-]\s*([A-Z][A-Za-z0-9 /&\-]{2,50})",
    r"Position[:\-]\s*([A-Z][A-Za-z0-9 /&\-]{2,50})",
]


def clean_job_description(text: str) -> str:
    """Normalise pasted job description text: bullets, dashes and runs of blank space."""
    text = (text or "").replace("\r\n", "\n").replace("•", "-").replace("–", "-")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def guess_title(text: str) -> str:
    """
    Best-effort role title for labelling saved reports.
    Falls back to anything ending with Engineer / Developer / Manager etc.
    """
    flat = re.sub(r"[ \t]+", " ", text or "")
    for p in TITLE_PATTERNS:
        m = re.search(p, flat, re.IGNORECASE)
        if m:
            return m.group(1).strip()
    guess = re.search(r"\b([A-Z][A-Za-z/]*(?:\s+[A-Z][A-Za-z/]*)*\s+(?:Engineer|Developer|Manager|Analyst|Scientist|Designer|Architect))\b", flat)
    return guess.group(1).strip() if guess else "General Role"
