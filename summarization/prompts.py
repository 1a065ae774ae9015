"""
Prompt templates for localized health-document summarization.
"""

# =========================
# Summary prompt
# =========================
HEALTH_SUMMARY_PROMPT = """Please summarize the following health document in {language}.
Provide a clear, comprehensive summary that includes:
1. Main health information and findings
2. Important recommendations or instructions
3. Any critical details that the patient should know

Document content:
{text}

Please provide the summary in {language}."""


def get_summary_prompt(text: str, language: str) -> str:
    """Build the single summarization prompt (language as instruction and closing directive)."""
    return HEALTH_SUMMARY_PROMPT.format(language=language, text=text)
