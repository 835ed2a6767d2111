"""Optional narrative summary for a rendered standup report.

The narrative is best-effort: any transport failure becomes a visible
annotation after the report instead of an exception.
"""

from standuplib import prompt_loader
from standuplib import report_render
from standuplib.llm_errors import LLMError
from standuplib.report_models import FailureKind
from standuplib.report_models import SourceResult
from standuplib.report_models import StandupReport


PROMPT_NAME = "standup_summary.txt"
SUMMARY_TITLE = "# Standup Report (AI Summary)"
FAILURE_HEADING = "## AI Summary Failed"
DIVIDER = "---"


#============================================
def build_summary_prompt(report: StandupReport) -> str:
	"""
	Render the summary prompt with the full report embedded as JSON.
	"""
	template = prompt_loader.load_prompt(PROMPT_NAME)
	return prompt_loader.render_prompt(template, {
		"author": report.author or "anyone",
		"days": str(report.days),
		"report_json": report_render.render_json(report, indent=None),
	})


#============================================
def request_ai_summary(client, prompt: str, max_tokens: int = 1200) -> SourceResult:
	"""
	Ask the text-generation client for a narrative.

	Returns:
		SourceResult with the narrative text, or an AI_SERVICE_FAILED
		result carrying the failure message.
	"""
	try:
		text = client.generate(prompt, purpose="standup summary", max_tokens=max_tokens)
	except LLMError as error:
		return SourceResult(value="", failure=FailureKind.AI_SERVICE_FAILED, detail=str(error))
	return SourceResult(value=text)


#============================================
def attach_ai_summary(report_text: str, summary: SourceResult) -> str:
	"""
	Prepend a narrative block, or append a failure notice.
	"""
	if not summary.ok:
		return report_text + f"\n{FAILURE_HEADING}\n{summary.detail}\n"
	return f"{SUMMARY_TITLE}\n\n{summary.value}\n\n{DIVIDER}\n\n" + report_text
