"""Render a StandupReport as JSON or as a markdown document."""

import json

from standuplib.report_models import CommitRecord
from standuplib.report_models import NoteEntry
from standuplib.report_models import ReportStats
from standuplib.report_models import StandupReport


DIGEST_LINE_LIMIT = 10
DIGEST_NOTICE = "... (see file for full details)"
NO_COMMITS_LINE = "No commits found."
NO_NOTES_LINE = "No memory logs found."


#============================================
def report_to_payload(report: StandupReport) -> dict:
	"""
	Convert a report into the JSON payload shape.
	"""
	return {
		"range": report.range_text,
		"author": report.author,
		"stats": {
			"reposTouched": report.stats.repos_touched,
			"totalCommits": report.stats.total_commits,
			"memoryEntries": report.stats.memory_entries,
		},
		"commits": [
			{"hash": c.hash, "date": c.date, "msg": c.msg, "repo": c.repo}
			for c in report.commits
		],
		"memory": [
			{"date": n.date, "content": n.content}
			for n in report.memory
		],
	}


#============================================
def report_from_payload(payload: dict) -> StandupReport:
	"""
	Rebuild a report from a parsed JSON payload.
	"""
	range_text = str(payload.get("range", "")).strip()
	days_text = range_text.split(" ", 1)[0]
	try:
		days = int(days_text)
	except ValueError as error:
		raise RuntimeError(f"Invalid report range: {range_text!r}") from error
	stats = payload.get("stats") or {}
	commits = tuple(
		CommitRecord(hash=item["hash"], date=item["date"], msg=item["msg"], repo=item["repo"])
		for item in payload.get("commits") or []
	)
	memory = tuple(
		NoteEntry(date=item["date"], content=item["content"])
		for item in payload.get("memory") or []
	)
	return StandupReport(
		days=days,
		author=payload.get("author") or "",
		stats=ReportStats(
			repos_touched=int(stats.get("reposTouched", 0)),
			total_commits=int(stats.get("totalCommits", 0)),
			memory_entries=int(stats.get("memoryEntries", 0)),
		),
		commits=commits,
		memory=memory,
	)


#============================================
def render_json(report: StandupReport, indent: int | None = 2) -> str:
	"""
	Serialize the report payload as JSON text.
	"""
	return json.dumps(report_to_payload(report), indent=indent, ensure_ascii=False)


#============================================
def note_digest(content: str, max_lines: int = DIGEST_LINE_LIMIT) -> str:
	"""
	Keep the first interesting lines of a note.

	A line is kept when it starts with a heading marker, starts with a list
	marker after trimming, or is non-empty after trimming. Kept lines are
	returned unmodified and in order.
	"""
	kept = []
	for line in content.split("\n"):
		if len(kept) >= max_lines:
			break
		stripped = line.strip()
		if line.startswith("#") or stripped.startswith("-") or stripped:
			kept.append(line)
	return "\n".join(kept)


#============================================
def group_commits_by_repo(commits) -> dict[str, list[CommitRecord]]:
	"""
	Group commits per repo in order of first appearance.
	"""
	groups: dict[str, list[CommitRecord]] = {}
	for commit in commits:
		groups.setdefault(commit.repo, []).append(commit)
	return groups


#============================================
def render_markdown(
	report: StandupReport,
	today_text: str,
	digest_lines: int = DIGEST_LINE_LIMIT,
) -> str:
	"""
	Build the markdown standup document.

	Args:
		report: aggregated report for this run.
		today_text: ISO date shown in the title line.
		digest_lines: line cap for each note digest.

	Returns:
		Markdown text ending with a newline.
	"""
	lines: list[str] = []
	lines.append(f"# Standup Report ({today_text})")
	lines.append("")
	lines.append(f"**Range:** Last {report.days} days")
	lines.append(f"**Author:** {report.author or 'anyone'}")
	lines.append(
		f"**Activity:** {report.stats.total_commits} commits across "
		+ f"{report.stats.repos_touched} repos."
	)
	lines.append("")

	lines.append("## Code Activity")
	if not report.commits:
		lines.append(NO_COMMITS_LINE)
		lines.append("")
	else:
		for repo_name, commits in group_commits_by_repo(report.commits).items():
			lines.append(f"### {repo_name}")
			for commit in commits:
				lines.append(f"- {commit.date} {commit.msg} `({commit.hash})`")
			lines.append("")

	lines.append("## Memory Logs")
	if not report.memory:
		lines.append(NO_NOTES_LINE)
		lines.append("")
	else:
		for note in report.memory:
			lines.append(f"### {note.date}")
			lines.append(note_digest(note.content, digest_lines))
			lines.append(DIGEST_NOTICE)
			lines.append("")

	return "\n".join(lines)
