"""Newsletter prompt templates for Techletter."""

SYSTEM_PROMPT = (
    "You are a professional newsletter writer who specializes in converting tech news "
    "into engaging email newsletters. Your writing style is professional yet "
    "conversational, and you excel at making complex topics accessible and interesting."
)

# (label, instruction) in the order they must appear in the newsletter
NEWSLETTER_SECTIONS = (
    (
        "📰 SUBJECT LINE",
        "Write a compelling subject line that would make someone want to open this email",
    ),
    ("👋 INTRODUCTION", "A brief, engaging introduction that sets up the context"),
    ("🔑 KEY HIGHLIGHTS", "3-4 main points from the article, each with a brief explanation"),
    ("💡 ANALYSIS", "A thoughtful analysis of what this means for the industry/readers"),
    ("🎯 TAKEAWAY", "One clear, actionable takeaway for the reader"),
)

NEWSLETTER_PROMPT = """Convert this {source_name} article into an engaging newsletter format. Make it professional but conversational.

Article Title: {title}
Article Content: {content}

Please format the newsletter with the following sections:

{sections}

Note: Do not use any markdown headings (###) in the output. Just use the emojis as section markers.
Make it concise, engaging, and valuable for the reader."""


def _render_sections() -> str:
    return "\n\n".join(
        f"{label}\n[{instruction}]" for label, instruction in NEWSLETTER_SECTIONS
    )


def build_prompt(
    title: str,
    content: str,
    *,
    source_name: str = "TechCrunch",
    max_content_chars: int | None = None,
) -> str:
    """Build the user prompt asking for a five-section newsletter.

    Args:
        title: The article title.
        content: The article body text.
        source_name: Site the article comes from, named in the instructions.
        max_content_chars: Optional cap on the body length; no cap by default.

    Returns:
        The prompt text.
    """
    if max_content_chars is not None:
        content = content[:max_content_chars]
    return NEWSLETTER_PROMPT.format(
        source_name=source_name,
        title=title,
        content=content,
        sections=_render_sections(),
    )
