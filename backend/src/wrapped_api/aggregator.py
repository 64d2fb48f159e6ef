"""Reduce raw GitHub profile, repository and event data into a wrapped report.

Everything here is pure: no I/O and no clock reads, so identical inputs always
produce identical reports. Event timestamps are bucketed in ``tz`` (or the
runtime's local zone when ``tz`` is None).
"""
from __future__ import annotations

import datetime as dt
import math
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from .schemas import (
    ContributionType,
    GitHubEvent,
    GitHubProfile,
    GitHubRepository,
    Language,
    MonthlyActivity,
    ProfileSummary,
    Stats,
    TopRepository,
    WrappedReport,
)

TOP_N = 4
UNKNOWN_COLOR = "#ccc"

LANGUAGE_COLORS: Dict[str, str] = {
    "TypeScript": "#3178c6",
    "JavaScript": "#f1e05a",
    "Python": "#3572A5",
    "Java": "#b07219",
    "Go": "#00ADD8",
    "Rust": "#dea584",
    "HTML": "#e34c26",
    "CSS": "#563d7c",
    "Vue": "#41b883",
    "React": "#61dafb",
    "C++": "#f34b7d",
    "C": "#555555",
    "C#": "#178600",
    "PHP": "#4F5D95",
    "Ruby": "#701516",
    "Swift": "#ffac45",
    "Kotlin": "#F18E33",
    "Dart": "#00B4AB",
}

WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

DEFAULT_DAY = "Monday"
DEFAULT_HOUR = 12

PUSH_EVENT = "PushEvent"
PULL_REQUEST_EVENT = "PullRequestEvent"
REVIEW_EVENT = "PullRequestReviewEvent"

COMMITS_PER_PUSH = 12
COMMITS_PER_REPO = 10

PERSONALITY = "The Open Sourcerer 🧙‍♂️"


def language_color(language: Optional[str]) -> str:
    return LANGUAGE_COLORS.get(language or "", UNKNOWN_COLOR)


def percent(part: int, total: int) -> int:
    """Whole-number share of ``total``, rounding halves up; 0 when total is 0."""
    if total <= 0:
        return 0
    return int(math.floor(part / total * 100 + 0.5))


def _local(ts: dt.datetime, tz: Optional[dt.tzinfo]) -> dt.datetime:
    return ts.astimezone(tz)


def top_languages(repositories: Iterable[GitHubRepository]) -> List[Language]:
    # Each repository counts once for its primary language, regardless of size.
    counts: Dict[str, int] = {}
    for repo in repositories:
        if repo.language:
            counts[repo.language] = counts.get(repo.language, 0) + 1
    total = sum(counts.values())
    langs = [Language(name=name, percent=percent(count, total), color=language_color(name)) for name, count in counts.items()]
    langs.sort(key=lambda lang: lang.percent, reverse=True)
    return langs[:TOP_N]


def top_repositories(repositories: Iterable[GitHubRepository]) -> List[TopRepository]:
    ranked = sorted(repositories, key=lambda r: r.stargazers_count, reverse=True)
    out = []
    for repo in ranked[:TOP_N]:
        language = repo.language or "Unknown"
        out.append(
            TopRepository(
                name=repo.name,
                description=repo.description or "No description",
                stars=repo.stargazers_count,
                forks=repo.forks_count,
                language=language,
                language_color=language_color(language),
            )
        )
    return out


def _most_frequent(counts: Dict, default):
    # max() keeps the first key reached on ties, i.e. insertion order.
    if not counts:
        return default
    return max(counts, key=counts.__getitem__)


def busiest_day(events: Iterable[GitHubEvent], tz: Optional[dt.tzinfo] = None) -> str:
    counts: Dict[str, int] = {}
    for ev in events:
        local = _local(ev.created_at, tz)
        # isoweekday(): Monday=1 .. Sunday=7
        name = WEEKDAYS[local.isoweekday() % 7]
        counts[name] = counts.get(name, 0) + 1
    return _most_frequent(counts, DEFAULT_DAY)


def busiest_hour(events: Iterable[GitHubEvent], tz: Optional[dt.tzinfo] = None) -> int:
    counts: Dict[int, int] = {}
    for ev in events:
        hour = _local(ev.created_at, tz).hour
        counts[hour] = counts.get(hour, 0) + 1
    return _most_frequent(counts, DEFAULT_HOUR)


def time_of_day(hour: int) -> str:
    if hour < 6:
        return "Late Night"
    if hour < 12:
        return "Morning"
    if hour > 18:
        return "Evening"
    return "Afternoon"


def longest_streak(events: Iterable[GitHubEvent], tz: Optional[dt.tzinfo] = None) -> int:
    """Longest run of consecutive calendar days with at least one event."""
    dates = sorted({_local(ev.created_at, tz).date() for ev in events})
    if not dates:
        return 0
    longest = current = 1
    for prev, cur in zip(dates, dates[1:]):
        if abs((cur - prev).days) == 1:
            current += 1
        else:
            current = 1
        longest = max(longest, current)
    return longest


def monthly_activity(events: Iterable[GitHubEvent], tz: Optional[dt.tzinfo] = None) -> List[MonthlyActivity]:
    # Events from different years share the same twelve buckets.
    counts = dict.fromkeys(MONTHS, 0)
    for ev in events:
        counts[MONTHS[_local(ev.created_at, tz).month - 1]] += 1
    return [MonthlyActivity(month=m, value=v) for m, v in counts.items()]


def contribution_breakdown(events: Sequence[GitHubEvent]) -> List[ContributionType]:
    types = Counter(ev.type for ev in events)
    total = len(events)
    pushes = types[PUSH_EVENT]
    prs = types[PULL_REQUEST_EVENT]
    reviews = types[REVIEW_EVENT]
    other = total - pushes - prs - reviews
    return [
        ContributionType(label="Commits", value=percent(pushes, total), color="#4ade80"),
        ContributionType(label="PRs", value=percent(prs, total), color="#a78bfa"),
        ContributionType(label="Reviews", value=percent(reviews, total), color="#fbbf24"),
        ContributionType(label="Other", value=percent(other, total), color="#f87171"),
    ]


def estimate_commits(push_events: int, public_repos: int) -> int:
    """Rough commit count; the events feed is capped and a push may bundle several commits."""
    if push_events > 0:
        return push_events * COMMITS_PER_PUSH
    return public_repos * COMMITS_PER_REPO


def aggregate(
    profile: GitHubProfile,
    repositories: Sequence[GitHubRepository],
    events: Sequence[GitHubEvent],
    *,
    tz: Optional[dt.tzinfo] = None,
) -> Stats:
    day = busiest_day(events, tz)
    time_label = time_of_day(busiest_hour(events, tz))
    pushes = sum(1 for ev in events if ev.type == PUSH_EVENT)

    return Stats(
        commits=estimate_commits(pushes, profile.public_repos),
        repos=profile.public_repos,
        stars_received=sum(r.stargazers_count for r in repositories),
        forks=sum(r.forks_count for r in repositories),
        top_languages=top_languages(repositories),
        top_repositories=top_repositories(repositories),
        busiest_day=day,
        busiest_time=time_label,
        longest_streak=longest_streak(events, tz),
        personality=PERSONALITY,
        personality_desc=f"You're most active on {day}s during the {time_label.lower()}.",
        monthly_activity=monthly_activity(events, tz),
        contribution_breakdown=contribution_breakdown(events),
    )


def summarize_profile(profile: GitHubProfile) -> ProfileSummary:
    return ProfileSummary(
        bio=profile.bio or "No bio available.",
        location=profile.location or "Earth",
        joined=str(profile.created_at.year) if profile.created_at else "",
        followers=profile.followers,
        following=profile.following,
    )


def build_report(
    profile: GitHubProfile,
    repositories: Sequence[GitHubRepository],
    events: Sequence[GitHubEvent],
    *,
    year: int,
    tz: Optional[dt.tzinfo] = None,
) -> WrappedReport:
    return WrappedReport(
        username=profile.login,
        avatar=profile.avatar_url,
        year=year,
        profile=summarize_profile(profile),
        stats=aggregate(profile, repositories, events, tz=tz),
    )
