"""Run one standup report end to end.

locate repos -> extract commits per repo -> read notes -> build report ->
render -> optional AI summary. Collector failures degrade to partial
results; only a missing workspace root raises.
"""

import os
from dataclasses import dataclass
from dataclasses import field
from datetime import date

from standuplib import ai_summary
from standuplib import git_log
from standuplib import note_reader
from standuplib import repo_locator
from standuplib import report_builder
from standuplib import report_render
from standuplib.report_models import FailureKind
from standuplib.report_models import SourceResult
from standuplib.report_models import StandupReport


#============================================
@dataclass(frozen=True)
class StandupConfig:
	"""
	Resolved run options; built once at the CLI boundary.
	"""
	workspace: str
	days: int = 1
	author: str = ""
	json_output: bool = False
	use_ai: bool = False
	notes_dir: str = note_reader.DEFAULT_NOTES_DIR
	notes_extension: str = note_reader.DEFAULT_NOTES_EXTENSION
	digest_lines: int = report_render.DIGEST_LINE_LIMIT
	llm_max_tokens: int = 1200


#============================================
@dataclass
class CollectionOutcome:
	"""
	Report plus the non-fatal failures met while collecting it.
	"""
	report: StandupReport
	failures: list[SourceResult] = field(default_factory=list)


#============================================
def resolve_workspace(path_text: str) -> str:
	"""
	Resolve the workspace to an absolute directory or raise.
	"""
	workspace = os.path.abspath(path_text or ".")
	if not os.path.isdir(workspace):
		raise RuntimeError(f"Workspace directory not found: {workspace}")
	return workspace


#============================================
def collect_report(
	config: StandupConfig,
	log_source=None,
	today: date | None = None,
	cwd: str | None = None,
	log_fn=None,
) -> CollectionOutcome:
	"""
	Collect commits and notes and merge them into one report.

	Args:
		config: resolved run options.
		log_source: object with query(repo_path, days, author, today);
			defaults to git_log.GitLogSource().
		today: last day of the window (defaults to date.today()).
		cwd: fallback base for the notes directory.
		log_fn: optional callable for progress logging.

	Returns:
		CollectionOutcome with the report and every degraded result.
	"""
	workspace = resolve_workspace(config.workspace)
	day = today or date.today()
	source = log_source or git_log.GitLogSource()
	failures: list[SourceResult] = []

	located = repo_locator.find_repos(workspace, log_fn=log_fn)
	if not located.ok:
		failures.append(located)

	commits_by_repo = []
	for repo_path in located.value:
		extracted = git_log.extract_commits(
			source,
			repo_path,
			config.days,
			config.author,
			day,
			log_fn=log_fn,
		)
		if not extracted.ok:
			failures.append(extracted)
			continue
		if extracted.value:
			commits_by_repo.append(extracted.value)

	notes = note_reader.read_notes(
		config.days,
		workspace,
		day,
		cwd=cwd,
		notes_dir=config.notes_dir,
		extension=config.notes_extension,
		log_fn=log_fn,
	)
	if not notes.ok:
		failures.append(notes)

	report = report_builder.build_report(commits_by_repo, notes.value, config.days, config.author)
	return CollectionOutcome(report=report, failures=failures)


#============================================
def render_report(
	report: StandupReport,
	config: StandupConfig,
	today: date | None = None,
	llm_client=None,
	log_fn=None,
	llm_setup_error: str = "",
) -> str:
	"""
	Render the report in the configured mode, adding the AI block if asked.

	A missing client (llm_setup_error says why) is reported like any other
	AI failure: the normal report plus a failure notice.
	"""
	if config.json_output:
		if config.use_ai and log_fn:
			log_fn("Skipping AI summary: not available with JSON output.")
		return report_render.render_json(report)

	day = today or date.today()
	text = report_render.render_markdown(report, day.isoformat(), config.digest_lines)
	if not config.use_ai:
		return text
	if llm_client is None:
		summary = SourceResult(
			value="",
			failure=FailureKind.AI_SERVICE_FAILED,
			detail=llm_setup_error or "No text-generation transport is configured.",
		)
	else:
		if log_fn:
			log_fn("Generating AI summary.")
		prompt = ai_summary.build_summary_prompt(report)
		summary = ai_summary.request_ai_summary(llm_client, prompt, config.llm_max_tokens)
	if not summary.ok and log_fn:
		log_fn(f"AI summary failed: {summary.detail}")
	return ai_summary.attach_ai_summary(text, summary)


#============================================
def run_standup(
	config: StandupConfig,
	log_source=None,
	llm_client=None,
	today: date | None = None,
	cwd: str | None = None,
	log_fn=None,
	llm_setup_error: str = "",
) -> str:
	"""
	Collect and render one report; returns the final output text.
	"""
	day = today or date.today()
	outcome = collect_report(config, log_source=log_source, today=day, cwd=cwd, log_fn=log_fn)
	return render_report(
		outcome.report,
		config,
		today=day,
		llm_client=llm_client,
		log_fn=log_fn,
		llm_setup_error=llm_setup_error,
	)
