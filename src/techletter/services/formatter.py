"""Newsletter display formatting and page rendering for Techletter."""

import html
import json
import re

from techletter.models import WorkflowState, WorkflowStatus

HEADING_PREFIX = re.compile(r"^###\s*")

STEPS = (
    (WorkflowStatus.SCRAPING, "Fetching article"),
    (WorkflowStatus.GENERATING, "Generating newsletter"),
)


def newsletter_paragraphs(newsletter: str) -> list[str]:
    """Split generated text into display paragraphs.

    One paragraph per line; asterisks and a leading ``###`` heading marker are
    removed. Blank lines are kept so the spacing of the text is preserved.
    """
    return [HEADING_PREFIX.sub("", line.replace("*", "")) for line in newsletter.split("\n")]


class PageRenderer:
    """Renders the single-page newsletter generator."""

    def __init__(self, source_name: str = "TechCrunch") -> None:
        self._source_name = source_name

    def render(self, state: WorkflowState) -> str:
        """Render the page for the given presentation state."""
        safe_source = html.escape(self._source_name)
        safe_url = html.escape(state.url, quote=True)
        button_label = "Processing..." if state.is_busy else "Generate"
        disabled = " disabled" if state.is_busy else ""

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{safe_source} Newsletter Generator</title>
<style>
body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
       background: #fff7ed; color: #1f2937; margin: 0; }}
main {{ max-width: 56rem; margin: 0 auto; padding: 3rem 1rem; }}
header {{ text-align: center; margin-bottom: 3rem; }}
h1 {{ color: #ea580c; }}
form {{ display: flex; gap: 1rem; margin-bottom: 2rem; }}
input[type=url] {{ flex: 1; padding: .75rem 1rem; border: 1px solid #e5e7eb; border-radius: .5rem; }}
button {{ padding: .75rem 1.5rem; background: #f97316; color: #fff; border: 0;
          border-radius: .5rem; font-weight: 500; cursor: pointer; }}
button:disabled {{ opacity: .5; cursor: not-allowed; }}
.error {{ margin-bottom: 2rem; padding: 1rem; background: #fef2f2; border: 1px solid #fecaca;
          border-radius: .5rem; color: #dc2626; }}
.steps {{ display: flex; justify-content: center; gap: 1rem; color: #4b5563; padding: 2rem 0; }}
.steps .active {{ color: #f97316; font-weight: 500; }}
.newsletter {{ background: #fff; border-radius: .5rem; box-shadow: 0 4px 12px rgba(0,0,0,.08);
               padding: 2rem; }}
.newsletter p {{ margin: 0 0 1rem; line-height: 1.6; }}
.copy {{ background: none; color: #f97316; padding: 0; margin-top: 1.5rem; }}
footer {{ margin-top: 3rem; text-align: center; font-size: .875rem; color: #6b7280; }}
</style>
</head>
<body>
<main>
<header>
<h1>📰 {safe_source} Newsletter Generator</h1>
<p>Transform {safe_source} articles into engaging newsletters instantly</p>
</header>
<form method="post" action="/" id="newsletter-form">
<input type="url" name="url" value="{safe_url}" placeholder="Paste your {safe_source} article URL here..." required>
<button type="submit" id="submit"{disabled}>{button_label}</button>
</form>
{self._render_error(state.error)}
{self._render_steps(state.status)}
{self._render_newsletter(state)}
<footer>Powered by Firecrawl</footer>
</main>
{self._render_script()}
</body>
</html>"""

    @staticmethod
    def _render_error(error: str) -> str:
        if not error:
            return ""
        return f'<div class="error" role="alert">{html.escape(error)}</div>'

    @staticmethod
    def _render_steps(status: WorkflowStatus) -> str:
        """Render the progress indicator shown while a run is in flight."""
        hidden = "" if status is not WorkflowStatus.IDLE else " hidden"
        active = ' class="active"'
        items = " <span>&rarr;</span> ".join(
            f'<span data-step="{step.value}"{active if step is status else ""}>{label}</span>'
            for step, label in STEPS
        )
        return f'<div class="steps" id="steps"{hidden}>{items}</div>'

    @staticmethod
    def _render_newsletter(state: WorkflowState) -> str:
        if not state.newsletter or state.is_busy:
            return ""
        paragraphs = "\n".join(
            f"<p>{html.escape(p)}</p>" for p in newsletter_paragraphs(state.newsletter)
        )
        # The raw text is embedded as JSON for the copy button.
        raw = json.dumps(state.newsletter).replace("</", "<\\/")
        return f"""<section class="newsletter">
<h2>Newsletter: {html.escape(state.title)}</h2>
{paragraphs}
<button type="button" class="copy" id="copy">Copy to clipboard</button>
<script type="application/json" id="newsletter-text">{raw}</script>
</section>"""

    @staticmethod
    def _render_script() -> str:
        return """<script>
document.getElementById("newsletter-form").addEventListener("submit", function () {
  var button = document.getElementById("submit");
  button.disabled = true;
  button.textContent = "Processing...";
  var steps = document.getElementById("steps");
  steps.hidden = false;
  steps.querySelector('[data-step="scraping"]').className = "active";
});
var copy = document.getElementById("copy");
if (copy) {
  copy.addEventListener("click", async function () {
    var text = JSON.parse(document.getElementById("newsletter-text").textContent);
    await navigator.clipboard.writeText(text);
    copy.textContent = "Copied!";
    setTimeout(function () { copy.textContent = "Copy to clipboard"; }, 2000);
  });
}
</script>"""
