from standuplib.report_models import CommitRecord
from standuplib.report_models import NoteEntry
from standuplib.report_models import ReportStats
from standuplib.report_models import StandupReport


#============================================
def merge_commits(commits_by_repo: list[list[CommitRecord]]) -> list[CommitRecord]:
	"""
	Concatenate per-repo commits and sort newest date first.

	Dates are compared as ISO strings; sorted() is stable with reverse=True,
	so same-date commits keep their concatenated order.
	"""
	merged: list[CommitRecord] = []
	for repo_commits in commits_by_repo:
		merged.extend(repo_commits)
	return sorted(merged, key=lambda commit: commit.date, reverse=True)


#============================================
def compute_stats(commits: list[CommitRecord], notes: list[NoteEntry]) -> ReportStats:
	"""
	Count touched repos, commits and note entries.
	"""
	repo_names = {commit.repo for commit in commits}
	return ReportStats(
		repos_touched=len(repo_names),
		total_commits=len(commits),
		memory_entries=len(notes),
	)


#============================================
def build_report(
	commits_by_repo: list[list[CommitRecord]],
	notes: list[NoteEntry],
	days: int,
	author: str | None,
) -> StandupReport:
	"""
	Merge collected commits and notes into one StandupReport.
	"""
	commits = merge_commits(commits_by_repo)
	note_list = list(notes)
	return StandupReport(
		days=days,
		author=author or "",
		stats=compute_stats(commits, note_list),
		commits=tuple(commits),
		memory=tuple(note_list),
	)
