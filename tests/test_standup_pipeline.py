import json
import os
from datetime import date
from types import SimpleNamespace

import pytest
import requests

from standuplib import llm_client
from standuplib import standup_pipeline
from standuplib.llm_errors import TransportUnavailableError
from standuplib.report_models import CommitRecord
from standuplib.report_models import FailureKind
from standuplib.report_models import SourceResult
from standuplib.transports.ollama import OllamaTransport


TODAY = date(2026, 2, 22)


#============================================
class FixtureLogSource:
	"""
	Log source serving per-repo fixtures keyed by directory name.
	"""

	def __init__(self, by_repo: dict, author_name: str = "Ada"):
		self.by_repo = by_repo
		self.author_name = author_name
		self.queries = []

	def query(self, repo_path, days, author, today):
		self.queries.append((repo_path, days, author, today))
		repo_name = os.path.basename(repo_path)
		if repo_name not in self.by_repo:
			return SourceResult(value=[], failure=FailureKind.LOG_QUERY_FAILED, detail="not a repo")
		if author and author != self.author_name:
			return SourceResult(value=[])
		rows = self.by_repo[repo_name]
		return SourceResult(value=[CommitRecord(h, d, m, repo_name) for h, d, m in rows])


#============================================
class FakeClient:
	def __init__(self, reply="", error=None):
		self.reply = reply
		self.error = error

	def generate(self, prompt, *, purpose, max_tokens):
		if self.error is not None:
			raise self.error
		return self.reply


#============================================
def make_workspace(tmp_path, repo_names: list[str]):
	"""
	Create a workspace holding one .git-marked directory per name.
	"""
	workspace = tmp_path / "ws"
	workspace.mkdir()
	for name in repo_names:
		(workspace / name / ".git").mkdir(parents=True)
	return workspace


#============================================
def make_config(workspace, **kwargs) -> standup_pipeline.StandupConfig:
	values = {"workspace": str(workspace), "days": 3, "author": "Ada"}
	values.update(kwargs)
	return standup_pipeline.StandupConfig(**values)


#============================================
def test_two_repos_one_with_commits(tmp_path) -> None:
	"""
	Only the repo with matching commits counts as touched.
	"""
	workspace = make_workspace(tmp_path, ["busy", "quiet"])
	source = FixtureLogSource({
		"busy": [("b1", "2026-02-22", "Add x"), ("b2", "2026-02-21", "Add y")],
		"quiet": [],
	})
	outcome = standup_pipeline.collect_report(make_config(workspace), source, TODAY, cwd=str(tmp_path))
	assert outcome.report.stats.repos_touched == 1
	assert outcome.report.stats.total_commits == 2
	assert outcome.failures == []
	text = standup_pipeline.render_report(outcome.report, make_config(workspace), TODAY)
	assert text.count("### busy") == 1
	assert "### quiet" not in text


#============================================
def test_author_with_no_commits_shows_none_found(tmp_path) -> None:
	"""
	An author with no commits anywhere renders the none-found line.
	"""
	workspace = make_workspace(tmp_path, ["busy"])
	source = FixtureLogSource({"busy": [("b1", "2026-02-22", "Add x")]})
	config = make_config(workspace, author="Nobody")
	text = standup_pipeline.run_standup(config, log_source=source, today=TODAY, cwd=str(tmp_path))
	assert "**Activity:** 0 commits across 0 repos." in text
	assert "## Code Activity\nNo commits found." in text
	assert source.queries[0][2] == "Nobody"


#============================================
def test_broken_repo_does_not_abort(tmp_path) -> None:
	"""
	A failing repo query is recorded and the other repos still report.
	"""
	workspace = make_workspace(tmp_path, ["good", "broken"])
	source = FixtureLogSource({"good": [("g1", "2026-02-22", "Work")]})
	outcome = standup_pipeline.collect_report(make_config(workspace), source, TODAY, cwd=str(tmp_path))
	assert [commit.repo for commit in outcome.report.commits] == ["good"]
	assert [failure.failure for failure in outcome.failures] == [FailureKind.LOG_QUERY_FAILED]


#============================================
def test_notes_window_with_gap(tmp_path) -> None:
	"""
	Notes for today and two days ago give two entries, today first.
	"""
	workspace = make_workspace(tmp_path, [])
	memory = workspace / "memory"
	memory.mkdir()
	(memory / "2026-02-22.md").write_text("# Today\n- a", encoding="utf-8")
	(memory / "2026-02-20.md").write_text("# Earlier\n- b", encoding="utf-8")
	outcome = standup_pipeline.collect_report(make_config(workspace), FixtureLogSource({}), TODAY, cwd=str(tmp_path))
	assert [note.date for note in outcome.report.memory] == ["2026-02-22", "2026-02-20"]
	text = standup_pipeline.render_report(outcome.report, make_config(workspace), TODAY)
	assert text.count("### 2026-02-") == 2


#============================================
def test_json_output_is_idempotent(tmp_path) -> None:
	"""
	Repeated runs over the same state give identical JSON.
	"""
	workspace = make_workspace(tmp_path, ["busy"])
	source = FixtureLogSource({"busy": [("b1", "2026-02-22", "Add x")]})
	config = make_config(workspace, json_output=True)
	first = standup_pipeline.run_standup(config, log_source=source, today=TODAY, cwd=str(tmp_path))
	second = standup_pipeline.run_standup(config, log_source=source, today=TODAY, cwd=str(tmp_path))
	assert first == second
	payload = json.loads(first)
	assert payload["stats"]["totalCommits"] == 1


#============================================
def test_ai_failure_appends_notice(tmp_path) -> None:
	"""
	An unreachable AI service leaves the report intact plus a notice.
	"""
	workspace = make_workspace(tmp_path, ["busy"])
	source = FixtureLogSource({"busy": [("b1", "2026-02-22", "Add x")]})
	plain = standup_pipeline.run_standup(make_config(workspace), log_source=source, today=TODAY, cwd=str(tmp_path))
	client = FakeClient(error=TransportUnavailableError("Could not execute 'gemini' command."))
	with_ai = standup_pipeline.run_standup(
		make_config(workspace, use_ai=True),
		log_source=source,
		llm_client=client,
		today=TODAY,
		cwd=str(tmp_path),
	)
	assert with_ai == plain + "\n## AI Summary Failed\nCould not execute 'gemini' command.\n"


#============================================
def test_ai_success_prepends_narrative(tmp_path) -> None:
	"""
	A successful narrative is placed before the normal report.
	"""
	workspace = make_workspace(tmp_path, ["busy"])
	source = FixtureLogSource({"busy": [("b1", "2026-02-22", "Add x")]})
	text = standup_pipeline.run_standup(
		make_config(workspace, use_ai=True),
		log_source=source,
		llm_client=FakeClient(reply="Shipped x."),
		today=TODAY,
		cwd=str(tmp_path),
	)
	assert text.startswith("# Standup Report (AI Summary)\n\nShipped x.\n\n---\n\n# Standup Report (2026-02-22)")


#============================================
def test_json_output_ignores_ai(tmp_path) -> None:
	"""
	Structured output never calls the AI client.
	"""
	workspace = make_workspace(tmp_path, [])
	messages = []
	client = FakeClient(error=AssertionError("should not be called"))
	text = standup_pipeline.run_standup(
		make_config(workspace, json_output=True, use_ai=True),
		log_source=FixtureLogSource({}),
		llm_client=client,
		today=TODAY,
		cwd=str(tmp_path),
		log_fn=messages.append,
	)
	assert json.loads(text)["commits"] == []
	assert "Skipping AI summary: not available with JSON output." in messages


#============================================
def test_missing_workspace_raises(tmp_path) -> None:
	"""
	A workspace that does not exist is a hard failure.
	"""
	config = make_config(tmp_path / "missing")
	with pytest.raises(RuntimeError):
		standup_pipeline.collect_report(config, FixtureLogSource({}), TODAY)


#============================================
def test_ai_without_client_appends_setup_error(tmp_path) -> None:
	"""
	A transport that could not be set up still yields the full report.
	"""
	workspace = make_workspace(tmp_path, ["busy"])
	source = FixtureLogSource({"busy": [("b1", "2026-02-22", "Add x")]})
	plain = standup_pipeline.run_standup(make_config(workspace), log_source=source, today=TODAY, cwd=str(tmp_path))
	text = standup_pipeline.run_standup(
		make_config(workspace, use_ai=True),
		log_source=source,
		today=TODAY,
		cwd=str(tmp_path),
		llm_setup_error="LLM setup failed: no model",
	)
	assert text == plain + "\n## AI Summary Failed\nLLM setup failed: no model\n"


#============================================
class BadBodySession:
	"""
	Session whose replies carry a body that is not JSON.
	"""

	def post(self, url, json=None, timeout=None):
		def broken_json():
			raise requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
		return SimpleNamespace(status_code=200, json=broken_json)


#============================================
def test_ollama_bad_body_keeps_report(tmp_path) -> None:
	"""
	A garbled Ollama reply becomes a failure notice, not an exception.
	"""
	workspace = make_workspace(tmp_path, ["busy"])
	source = FixtureLogSource({"busy": [("b1", "2026-02-22", "Add x")]})
	client = llm_client.LLMClient(transports=[OllamaTransport(model="m", session=BadBodySession())])
	text = standup_pipeline.run_standup(
		make_config(workspace, use_ai=True),
		log_source=source,
		llm_client=client,
		today=TODAY,
		cwd=str(tmp_path),
	)
	assert text.startswith("# Standup Report (2026-02-22)")
	assert text.endswith("\n## AI Summary Failed\nOllama chat returned a non-JSON body\n")
