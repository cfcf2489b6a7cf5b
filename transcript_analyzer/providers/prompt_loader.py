from pathlib import Path

from transcript_analyzer.providers.exceptions import ProviderError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the transcript message template from a file.

    Args:
        path: Path to the template file.
              Defaults to the bundled transcript_prompt.txt.

    Returns:
        The raw template string with a ``{transcript}`` placeholder.

    Raises:
        ProviderError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "transcript_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProviderError(f"Failed to load prompt template: {exc}") from exc


def render_transcript_message(transcript: str, template: str | None = None) -> str:
    """Render the user message carrying the transcript."""
    if template is None:
        template = load_prompt_template()
    return template.format(transcript=transcript)
